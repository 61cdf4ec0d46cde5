"""Textual integration for storefx. Opt-in — requires textual.

batch_runner(app) lets a Store run each notification wave inside
app.batch_update(), so every widget touched by one dispatch repaints once.
connect() binds a projection to a widget-updating effect with the same guards
the rest of this module uses: skip while paused or not running, swallow
NoMatches from widget queries, marshal cross-thread calls.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Mapping

from textual.css.query import NoMatches

from storefx.batch import run_batched, schedule_render
from storefx.binding import Binding, Projection

logger = logging.getLogger("storefx.textual")

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend connected effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def batch_runner(app) -> Callable[[Callable[[], None]], None]:
    """A Store batch callable that commits one dispatch as one screen update.

    Usage:
        store = create_store(reducer, initial, batch=batch_runner(app))
    """
    logger.info("Batching store notifications through %r", app)

    def _run(fn: Callable[[], None]) -> None:
        with app.batch_update():
            run_batched(fn)

    return _run


class WidgetBinding:
    """Render target for connect(): a Binding whose render is a guarded effect."""

    def __init__(
        self,
        app,
        store,
        projection: Projection,
        effect: Callable[[dict[str, Any]], None],
        own_props: Mapping[str, Any] | None = None,
    ) -> None:
        self._app = app
        self._effect = effect
        self._main = threading.get_ident()
        self._render_requested = False
        self.own_props = dict(own_props or {})
        self.binding = Binding(projection, store, self.request_render)

    @property
    def mounted(self) -> bool:
        return self.binding.mounted

    def mount(self) -> None:
        self.binding.mount()
        self._render()

    def request_render(self) -> None:
        if not self.mounted:
            return
        self._render_requested = True
        schedule_render(self)

    def _flush_render(self) -> None:
        if self._render_requested and self.mounted:
            self._render()

    def _render(self) -> None:
        self._render_requested = False
        props = self.binding.evaluate(self.own_props)
        if is_safe(self._app):
            if threading.get_ident() != self._main:
                self._app.call_from_thread(self._safe, props)
            else:
                self._safe(props)
        self.binding.committed()

    def _safe(self, props: dict[str, Any]) -> None:
        try:
            self._effect(props)
        except NoMatches:
            pass

    def dispose(self) -> None:
        """Stop reacting to the store."""
        self.binding.unmount()


def connect(app, store, projection, effect, *, own_props=None) -> WidgetBinding:
    """Run effect(props) now and whenever projection's result changes.

    Guards against firing during pause/not-running, catches NoMatches
    from widget queries, and marshals cross-thread calls via call_from_thread.

    Usage:
        handle = connect(
            app,
            store,
            lambda state, props: {"count": state["count"]},
            lambda props: app.query_one("#count", Static).update(str(props["count"])),
        )
        ...
        handle.dispose()
    """
    handle = WidgetBinding(app, store, projection, effect, own_props)
    handle.mount()
    return handle
