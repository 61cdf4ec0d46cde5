"""Listener lists and scoped subscription nodes.

A SubscriptionNode looks like a store to whoever holds it: get_state and
dispatch are borrowed from its parent, but subscribe() registers on a private
listener list. notify_descendants() fires only that list, so a binding can
re-broadcast to its own subtree without waking siblings.
"""

from __future__ import annotations

from typing import Callable

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class _Registration:
    """One subscribe() call. Identity distinguishes repeated listeners."""

    __slots__ = ("listener", "active")

    def __init__(self, listener: Listener) -> None:
        self.listener = listener
        self.active = True


class Listeners:
    """Ordered listener registrations shared by Store and SubscriptionNode.

    notify() snapshots the registrations before calling anything: listeners
    added during a wave wait for the next one, listeners removed during a
    wave still run in it.
    """

    __slots__ = ("_registrations",)

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []

    def add(self, listener: Listener) -> Unsubscribe:
        """Register a listener. Returns a function that removes it."""
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        registration = _Registration(listener)
        self._registrations.append(registration)

        def _unsubscribe() -> None:
            if not registration.active:
                return  # already removed
            registration.active = False
            self._registrations.remove(registration)

        return _unsubscribe

    def notify(self) -> None:
        for registration in list(self._registrations):
            registration.listener()

    def clear(self) -> None:
        for registration in self._registrations:
            registration.active = False
        self._registrations.clear()

    def __len__(self) -> int:
        return len(self._registrations)


class SubscriptionNode:
    """Store-like scope over a parent store or node."""

    __slots__ = ("parent", "get_state", "dispatch", "_listeners")

    def __init__(self, parent) -> None:
        self.parent = parent
        self.get_state = parent.get_state
        self.dispatch = parent.dispatch
        self._listeners = Listeners()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._listeners.add(listener)

    def notify_descendants(self) -> None:
        """Like dispatch, but without touching state."""
        self._listeners.notify()

    def clear(self) -> None:
        """Drop every registration. Used when the owning binding goes away."""
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"SubscriptionNode(listeners={len(self._listeners)})"
