"""Tests for provide() and current_store()."""

import pytest

from storefx import MissingProviderError, SubscriptionNode, create_store, current_store, provide
from storefx.errors import StorefxError


def _store():
    return create_store(lambda state, action: state, {})


class TestProvide:
    def test_current_store(self):
        store = _store()
        with provide(store) as provided:
            assert provided is store
            assert current_store() is store

    def test_nested_scopes_restore(self):
        store = _store()
        node = SubscriptionNode(store)
        with provide(store):
            with provide(node):
                assert current_store() is node
            assert current_store() is store

    def test_restored_on_exception(self):
        store = _store()
        with pytest.raises(RuntimeError):
            with provide(store):
                raise RuntimeError("oops")
        with pytest.raises(MissingProviderError):
            current_store()

    def test_missing_provider(self):
        with pytest.raises(MissingProviderError):
            current_store()

    def test_missing_provider_is_lookup_error(self):
        with pytest.raises(LookupError):
            current_store()
        assert issubclass(MissingProviderError, StorefxError)
