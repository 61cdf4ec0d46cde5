"""Store — the root state container.

A Store holds the current state, replaces it only by running the reducer in
dispatch(), and notifies its listeners synchronously after every dispatch.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from storefx.batch import run_batched
from storefx.errors import InvalidReducerError
from storefx.subscription import Listener, Listeners, Unsubscribe

logger = logging.getLogger("storefx.store")

S = TypeVar("S")

Reducer = Callable[[S, Any], S]
BatchRunner = Callable[[Callable[[], None]], None]


class Store(Generic[S]):
    """State container exposing get_state, subscribe and dispatch."""

    __slots__ = ("_reducer", "_state", "_listeners", "_batch")

    def __init__(
        self,
        reducer: Reducer,
        initial_state: S,
        *,
        batch: BatchRunner | None = None,
    ) -> None:
        if not callable(reducer):
            raise InvalidReducerError(
                f"reducer must be callable, got {type(reducer).__name__}"
            )
        self._reducer = reducer
        self._state = initial_state
        self._listeners = Listeners()
        self._batch = batch if batch is not None else run_batched

    def get_state(self) -> S:
        """Current state. Not a copy: callers must not mutate it."""
        return self._state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener. Returns a function that removes it."""
        return self._listeners.add(listener)

    def dispatch(self, action: Any) -> None:
        """Run the reducer, store the result, then notify every listener.

        Reducer errors propagate and leave state untouched. A dispatch issued
        from a listener completes before the outer wave continues.
        """
        self._state = self._reducer(self._state, action)
        logger.debug("dispatch %r -> %d listeners", action, len(self._listeners))
        self._batch(self._listeners.notify)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Store({self._state!r}, listeners={len(self._listeners)})"


def create_store(
    reducer: Reducer,
    initial_state: Any = None,
    *,
    batch: BatchRunner | None = None,
) -> Store:
    """Create a Store. A missing initial state starts as an empty dict.

    Usage:
        def reducer(state, action):
            if action["type"] == "INCREMENT":
                return {**state, "count": state["count"] + 1}
            return state

        store = create_store(reducer, {"count": 0})
        store.dispatch({"type": "INCREMENT"})
        store.get_state()  # {"count": 1}
    """
    if initial_state is None:
        initial_state = {}
    return Store(reducer, initial_state, batch=batch)
