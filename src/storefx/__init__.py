"""storefx: a minimal reducer store with scoped, bail-out aware bindings."""

from importlib.metadata import version as _version

__version__ = _version("storefx")

from storefx.errors import (
    StorefxError,
    InvalidReducerError,
    ProjectionError,
    MissingProviderError,
)
from storefx.equality import shallow_equal
from storefx.subscription import SubscriptionNode
from storefx.store import Store, create_store
from storefx.batch import batch, batched, run_batched, get_pending_count
from storefx.context import provide, current_store
from storefx.binding import Binding, Phase, set_projection_error_policy
from storefx.component import Component, BoundComponent, bind_component, render_child
from storefx.hooks import get_dispatcher, get_selection
# textual NOT auto-imported — opt-in only

__all__ = [
    "StorefxError",
    "InvalidReducerError",
    "ProjectionError",
    "MissingProviderError",
    "shallow_equal",
    "SubscriptionNode",
    "Store",
    "create_store",
    "batch",
    "batched",
    "run_batched",
    "get_pending_count",
    "provide",
    "current_store",
    "Binding",
    "Phase",
    "set_projection_error_policy",
    "Component",
    "BoundComponent",
    "bind_component",
    "render_child",
    "get_dispatcher",
    "get_selection",
]
