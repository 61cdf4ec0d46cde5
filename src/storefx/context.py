"""Provider scope — which store the code currently running should use.

Bound components and hooks never reach for a global store. They read the
nearest handle installed by provide(), which a bound component re-installs
with its own SubscriptionNode while it renders its children.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Union

from storefx.errors import MissingProviderError

if TYPE_CHECKING:
    from storefx.store import Store
    from storefx.subscription import SubscriptionNode

    StoreLike = Union[Store, SubscriptionNode]

_current_store: contextvars.ContextVar[StoreLike | None] = contextvars.ContextVar(
    "current_store", default=None
)


@contextmanager
def provide(store: StoreLike) -> Iterator[StoreLike]:
    """Make store the nearest scope for everything inside the block.

    Usage:
        with provide(store):
            todo_list = TodoList()
            todo_list.mount()
    """
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def current_store() -> StoreLike:
    """The nearest provided store or node. Raises MissingProviderError outside provide()."""
    store = _current_store.get()
    if store is None:
        raise MissingProviderError(
            "no store in scope; wrap the caller in storefx.provide(store)"
        )
    return store
