"""Render batching — the envelope around a notification wave.

Store.dispatch() runs its listeners through run_batched(). While a batch is
open, render requests are queued instead of executed; when the outermost batch
closes, each queued target renders once, in first-request order. Listener
invocation itself is never deferred or reordered, only the renders it asks for.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

if TYPE_CHECKING:
    from storefx.component import Component
    from storefx.textual import WidgetBinding

    RenderTarget = Component | WidgetBinding

logger = logging.getLogger("storefx.batch")

P = ParamSpec("P")
R = TypeVar("R")

# Batch depth counter. When > 0, render requests are deferred.
_batch_depth: int = 0

# Targets awaiting a render, in request order (dict as an ordered set).
_pending: dict[RenderTarget, None] = {}


def begin_batch() -> None:
    """Start holding back render requests until the matching end_batch()."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Close one level; closing the last level renders every held-back target."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def is_batching() -> bool:
    return _batch_depth > 0


def schedule_render(target: RenderTarget) -> None:
    """Ask target to render.

    If inside a batch, defers. Otherwise, renders immediately.
    """
    if _batch_depth > 0:
        _pending[target] = None
    else:
        target._flush_render()


def _flush_pending() -> None:
    """Render queued targets, including ones queued by those renders.

    A target whose render raises does not stop the others: every queued
    target still renders, then the first error is re-raised.
    """
    global _batch_depth
    first_error: Exception | None = None
    # Requests made while flushing join this flush instead of rendering
    # re-entrantly.
    _batch_depth += 1
    try:
        while _pending:
            queued = list(_pending)
            _pending.clear()
            for target in queued:
                try:
                    target._flush_render()
                except Exception as exc:
                    if first_error is None:
                        first_error = exc
                    else:
                        logger.error("%r failed to render", target, exc_info=exc)
    finally:
        _batch_depth -= 1
    if first_error is not None:
        raise first_error


def get_pending_count() -> int:
    """How many render targets are queued for the next flush."""
    return len(_pending)


def run_batched(fn: Callable[[], None]) -> None:
    """Run fn so that the renders it requests are committed together."""
    begin_batch()
    try:
        fn()
    finally:
        end_batch()


def batched(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: coalesce every render requested inside fn.

    Usage:
        @batched
        def load(store):
            store.dispatch({"type": "RESET"})
            store.dispatch({"type": "LOAD", "payload": rows})
            # bound components render once, after both dispatches
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with batch():
            return fn(*args, **kwargs)

    return wrapper


@contextmanager
def batch():
    """Hold back render requests for the duration of the block.

    Usage:
        with batch():
            store.dispatch(a)
            store.dispatch(b)
            # queued renders run here
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
