"""Hook-style access to the store in scope, without a Binding.

Both functions are meant to be called from a component's render function.
get_dispatcher() only needs a provider scope; get_selection() also needs the
component being rendered, because it re-renders that component.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from storefx.binding import handle_projection_error
from storefx.component import Component, current_owner
from storefx.context import current_store

T = TypeVar("T")


def get_dispatcher() -> Callable[[Any], None]:
    """The root store's dispatch, reached through whatever scope is nearest."""
    return current_store().dispatch


class _Selection:
    """Hook slot: the latest selector, its cached value, one subscription."""

    __slots__ = ("owner", "store", "selector", "value", "_unsubscribe")

    def __init__(self, owner: Component, store) -> None:
        self.owner = owner
        self.store = store
        self.selector: Callable[[Any], Any] | None = None
        self.value: Any = None
        self._unsubscribe = store.subscribe(self._on_update)

    def _on_update(self) -> None:
        if self._unsubscribe is None:
            return
        try:
            next_value = self.selector(self.store.get_state())
            if next_value is self.value:
                return
        except Exception as exc:
            handle_projection_error(self.owner, exc)
        self.owner.request_render()

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()


def get_selection(selector: Callable[[Any], T]) -> T:
    """Select a value from the store in scope and re-render when it changes.

    The selector runs now, during the render. Afterwards every notification
    re-runs the latest selector; the component re-renders only when the result
    is a different object (identity, not shallow equality). A selector that
    raises during a notification forces a re-render instead.

    Usage:
        def counter(props):
            count = get_selection(lambda state: state["count"])
            dispatch = get_dispatcher()
            return f"{count} clicks"
    """
    owner = current_owner.get()
    if owner is None:
        raise RuntimeError("get_selection() called outside of a component render")
    store = current_store()
    slot: _Selection = owner._next_hook(lambda: _Selection(owner, store))
    slot.selector = selector
    slot.value = selector(store.get_state())
    return slot.value
