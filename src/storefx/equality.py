"""Shallow equality for derived props.

Two values are shallow-equal when they are the same object, or when both are
mappings with the same keys whose values are pairwise identical (scalars by
value). Nested mappings are compared by reference, never recursively:

    shallow_equal({"a": 1}, {"a": 1})          # True
    shallow_equal({"a": 1, "b": {}}, {"a": 1, "b": {}})  # False
"""

from __future__ import annotations

from collections.abc import Mapping


_SCALARS = (str, bytes, int, float, complex)


def _same(a: object, b: object) -> bool:
    # Scalars compare by value, everything else by identity.
    if a is b:
        return True
    return type(a) is type(b) and isinstance(a, _SCALARS) and a == b


def shallow_equal(a: object, b: object) -> bool:
    """One-level key-by-key comparison of mapping-shaped values."""
    if _same(a, b):
        return True
    if not isinstance(a, Mapping) or not isinstance(b, Mapping):
        return False
    if len(a) != len(b):
        return False
    for key, value in a.items():
        if key not in b:
            return False
        if not _same(value, b[key]):
            return False
    return True
