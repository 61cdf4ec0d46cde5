"""Error types raised by storefx.

Removing a listener twice is deliberately absent from this list: an
unsubscribe that already ran is a no-op, never an error.
"""

from __future__ import annotations


class StorefxError(Exception):
    """Base class for every error raised by storefx itself."""


class InvalidReducerError(StorefxError, TypeError):
    """create_store() was given a reducer that is not callable."""


class ProjectionError(StorefxError):
    """A projection or selector raised while reacting to a notification.

    Only raised under the "raise" projection error policy; the default
    policy logs the failure and forces a refresh instead.
    """


class MissingProviderError(StorefxError, LookupError):
    """A store was requested outside of any provide() scope."""
