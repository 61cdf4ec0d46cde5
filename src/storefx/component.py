"""Components — a minimal synchronous rendering collaborator.

The core only needs three things from a UI framework: a way to request a
render, a render pass that re-evaluates the binding, and mount/unmount calls.
Component provides exactly that, synchronously, so bindings can be used (and
tested) without a real toolkit. Re-render requests go through
schedule_render(), so all the renders asked for during one dispatch are
committed together.

Children are created from inside a render with render_child(); a child that
is not rendered again in the parent's next pass is unmounted.
"""

from __future__ import annotations

import contextvars
import functools
import logging
from collections.abc import Mapping
from contextlib import nullcontext
from typing import Any, Callable

from storefx.batch import schedule_render
from storefx.binding import Binding, Projection
from storefx.context import _current_store, current_store, provide

logger = logging.getLogger("storefx.component")

RenderFn = Callable[[dict[str, Any]], Any]

# The component whose render function is running. Hooks attach to it.
current_owner: contextvars.ContextVar[Component | None] = contextvars.ContextVar(
    "current_owner", default=None
)


class Component:
    """Hosts a render function, its hooks and its keyed children."""

    def __init__(self, render_fn: RenderFn) -> None:
        self._render_fn = render_fn
        self.props: dict[str, Any] = {}
        self.output: Any = None
        self.render_count = 0
        self.mounted = False
        self._scope = None
        self._render_requested = False
        self._hooks: list = []
        self._hook_cursor = 0
        self._children: dict[Any, Component] = {}
        self._seen_children: set = set()

    # --- Lifecycle ---

    def mount(self, props: Mapping[str, Any] | None = None) -> None:
        """Capture the enclosing scope and render for the first time."""
        if self.mounted:
            raise RuntimeError(f"{self!r} is already mounted")
        self.props = dict(props or {})
        self._scope = _current_store.get()
        self.mounted = True
        try:
            self._render()
        except BaseException:
            # A failed first render leaves nothing subscribed.
            self.unmount()
            raise

    def update(self, props: Mapping[str, Any] | None = None) -> None:
        """Render again with new props from the parent."""
        if not self.mounted:
            raise RuntimeError(f"{self!r} is not mounted")
        self.props = dict(props or {})
        self._render()

    def unmount(self) -> None:
        if not self.mounted:
            return
        self.mounted = False
        self._render_requested = False
        for child in list(self._children.values()):
            child.unmount()
        self._children.clear()
        for hook in self._hooks:
            hook.dispose()
        self._hooks.clear()

    def request_render(self) -> None:
        """Ask for a re-render with the current props. Coalesced inside a batch."""
        if not self.mounted:
            return
        self._render_requested = True
        schedule_render(self)

    # --- Rendering ---

    def _flush_render(self) -> None:
        # Skip targets already rendered (e.g. by their parent) since the request.
        if self._render_requested and self.mounted:
            self._render()

    def _render_scope(self):
        return provide(self._scope) if self._scope is not None else nullcontext()

    def _render_props(self) -> dict[str, Any]:
        return self.props

    def _render(self) -> None:
        self._render_requested = False
        self._hook_cursor = 0
        self._seen_children = set()
        token = current_owner.set(self)
        try:
            with self._render_scope():
                self.output = self._render_fn(self._render_props())
        finally:
            current_owner.reset(token)
        self.render_count += 1
        self._drop_stale_children()
        self._committed()

    def _committed(self) -> None:
        pass

    def _drop_stale_children(self) -> None:
        for key in [k for k in self._children if k not in self._seen_children]:
            logger.debug("%r: child %r no longer rendered, unmounting", self, key)
            self._children.pop(key).unmount()

    # --- Hook and child slots ---

    def _next_hook(self, factory: Callable[[], Any]) -> Any:
        index = self._hook_cursor
        self._hook_cursor += 1
        if index == len(self._hooks):
            self._hooks.append(factory())
        return self._hooks[index]

    def _render_child(
        self,
        key: Any,
        factory: Callable[[], Component],
        props: Mapping[str, Any] | None,
    ) -> Component:
        if key in self._seen_children:
            raise ValueError(f"duplicate child key {key!r} in {self!r}")
        self._seen_children.add(key)
        child = self._children.get(key)
        if child is None:
            child = factory()
            child.mount(props)
            self._children[key] = child
        else:
            child.update(props)
        return child

    @property
    def name(self) -> str:
        return getattr(self._render_fn, "__name__", type(self._render_fn).__name__)

    def __repr__(self) -> str:
        state = "mounted" if self.mounted else "unmounted"
        return f"{type(self).__name__}({self.name}, {state})"


class BoundComponent(Component):
    """A Component whose props are extended by a Binding's projection."""

    def __init__(self, projection: Projection, render_fn: RenderFn) -> None:
        super().__init__(render_fn)
        self._projection = projection
        self.binding: Binding | None = None

    def mount(self, props: Mapping[str, Any] | None = None) -> None:
        if self.mounted:
            raise RuntimeError(f"{self!r} is already mounted")
        scope = current_store()
        if self.binding is None:
            self.binding = Binding(self._projection, scope, self.request_render)
        else:
            self.binding.rebind(scope)
        super().mount(props)
        self.binding.mount()

    def unmount(self) -> None:
        if not self.mounted:
            return
        super().unmount()
        self.binding.unmount()

    def _render_scope(self):
        # Children bind to this component's node, not to the parent scope.
        return provide(self.binding.node)

    def _render_props(self) -> dict[str, Any]:
        return self.binding.evaluate(self.props)

    def _committed(self) -> None:
        self.binding.committed()


def bind_component(projection: Projection) -> Callable[[RenderFn], Callable[[], BoundComponent]]:
    """Connect a render function to the store in scope.

    The render function receives its own props merged with the projection's
    result, plus the root store's dispatch. It re-renders only when the
    projection's result stops being shallow-equal to the previous one.

    Usage:
        @bind_component(lambda state, props: {"todos": state["todos"]})
        def todo_list(props):
            return [todo["id"] for todo in props["todos"]]

        with provide(store):
            view = todo_list()
            view.mount()
    """

    def wrap(render_fn: RenderFn) -> Callable[[], BoundComponent]:
        @functools.wraps(render_fn)
        def factory() -> BoundComponent:
            return BoundComponent(projection, render_fn)

        return factory

    return wrap


def render_child(
    key: Any,
    factory: Callable[[], Component],
    props: Mapping[str, Any] | None = None,
) -> Component:
    """Mount or update the keyed child of the component currently rendering."""
    owner = current_owner.get()
    if owner is None:
        raise RuntimeError("render_child() called outside of a component render")
    return owner._render_child(key, factory, props)
