"""Bindings — derive props from state and decide whether to re-render.

A Binding sits between a parent scope (the root Store or an ancestor's
SubscriptionNode) and one component. On every notification it re-runs its
projection and compares the result with the last one:

- shallow-equal: no render; notify its own node right away so descendants
  still get a chance to re-evaluate (bail-out never stops the notify wave);
- different: keep the new props and ask the rendering collaborator to
  render. Once that render is done the collaborator calls committed(), which
  notifies the node, so descendants read the parent's committed props.

The rendering collaborator supplies request_render and calls evaluate()
during each render, committed() after it, and mount()/unmount() once each.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, Callable, Literal

from storefx.equality import shallow_equal
from storefx.errors import ProjectionError
from storefx.subscription import SubscriptionNode, Unsubscribe

logger = logging.getLogger("storefx.binding")

Projection = Callable[[Any, Mapping[str, Any]], Any]
ErrorPolicy = Literal["refresh", "raise"]

_EMPTY: Mapping[str, Any] = {}

# ─── Projection error policy ─────────────────────────────────────────────────
_projection_error_policy: ErrorPolicy = "refresh"


def set_projection_error_policy(policy: ErrorPolicy) -> None:
    """Choose what a failing projection or selector does during a notification.

    "refresh" (default): log at debug level and force a re-render, so the
    error resurfaces, if at all, in the render itself.
    "raise": raise ProjectionError from the dispatch that triggered it.
    """
    global _projection_error_policy
    if policy not in ("refresh", "raise"):
        raise ValueError(f"unknown projection error policy: {policy!r}")
    _projection_error_policy = policy


def get_projection_error_policy() -> ErrorPolicy:
    return _projection_error_policy


def handle_projection_error(owner: object, exc: Exception) -> None:
    """Apply the projection error policy. Raises under "raise", logs otherwise."""
    if _projection_error_policy == "raise":
        raise ProjectionError(f"{owner!r} failed to project state: {exc!r}") from exc
    logger.debug("%r: projection failed, forcing refresh", owner, exc_info=exc)


class Phase(enum.Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"
    RENDERED = "rendered"


class Binding:
    """Per-component connector between a parent scope and a render."""

    def __init__(
        self,
        projection: Projection,
        parent,
        request_render: Callable[[], None],
    ) -> None:
        if not callable(projection):
            raise TypeError(f"projection must be callable, got {type(projection).__name__}")
        self._projection = projection
        self._request_render = request_render
        self.parent = parent
        self.node = SubscriptionNode(parent)
        self.props_ref: Mapping[str, Any] = _EMPTY
        self.mapped_props: Any = None
        self.phase = Phase.IDLE
        self._unsubscribe: Unsubscribe | None = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def rebind(self, parent) -> None:
        """Move to a different parent scope. The node is rebuilt only on change."""
        if parent is self.parent:
            return
        was_mounted = self.mounted
        self.unmount()
        self.parent = parent
        self.node = SubscriptionNode(parent)
        if was_mounted:
            self.mount()

    def evaluate(self, own_props: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Render-time projection. Stores own props and mapped props, returns output props."""
        self.props_ref = own_props if own_props is not None else _EMPTY
        self.mapped_props = self._projection(self.parent.get_state(), self.props_ref)
        return self.output_props()

    def output_props(self) -> dict[str, Any]:
        props = dict(self.props_ref)
        if isinstance(self.mapped_props, Mapping):
            props.update(self.mapped_props)
        props["dispatch"] = self.parent.dispatch
        return props

    def mount(self) -> None:
        """Start listening to the parent scope. Idempotent."""
        if self._unsubscribe is None:
            self._unsubscribe = self.parent.subscribe(self._on_parent_update)

    def unmount(self) -> None:
        """Stop listening and release the node's listeners. Idempotent."""
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()
        self.node.clear()
        self.phase = Phase.IDLE

    def committed(self) -> None:
        """Called after every completed render: re-broadcast to descendants."""
        self.phase = Phase.RENDERED
        self.node.notify_descendants()

    def _on_parent_update(self) -> None:
        # The parent's snapshot may still hold us after an unmount mid-wave.
        if not self.mounted:
            return
        self.phase = Phase.EVALUATING
        try:
            next_mapped = self._projection(self.parent.get_state(), self.props_ref)
        except Exception as exc:
            handle_projection_error(self, exc)
            self._request_render()
            return

        if shallow_equal(self.mapped_props, next_mapped):
            logger.debug("%r: props unchanged, skipping render", self)
            self.phase = Phase.IDLE
            self.node.notify_descendants()
            return

        self.mapped_props = next_mapped
        self._request_render()

    def __repr__(self) -> str:
        name = getattr(self._projection, "__name__", type(self._projection).__name__)
        return f"Binding({name}, {self.phase.value})"
