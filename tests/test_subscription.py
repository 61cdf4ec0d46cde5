"""Tests for SubscriptionNode and its listener list."""

import pytest

from storefx import SubscriptionNode, create_store


def _counter(state, action):
    return state + 1 if action == "inc" else state


class TestSubscriptionNode:
    def test_delegates_state_and_dispatch(self):
        store = create_store(_counter, 0)
        node = SubscriptionNode(store)
        node.dispatch("inc")
        assert node.get_state() == 1
        assert store.get_state() == 1

    def test_nested_node_reaches_root(self):
        store = create_store(_counter, 0)
        inner = SubscriptionNode(SubscriptionNode(store))
        inner.dispatch("inc")
        assert store.get_state() == 1
        assert inner.dispatch == store.dispatch

    def test_private_listeners(self):
        """Subscribing to a node does not subscribe to the store."""
        store = create_store(_counter, 0)
        node = SubscriptionNode(store)
        log = []
        node.subscribe(lambda: log.append("node"))
        store.dispatch("inc")
        assert log == []
        assert store.listener_count == 0

    def test_notify_descendants_in_order(self):
        node = SubscriptionNode(create_store(_counter, 0))
        log = []
        node.subscribe(lambda: log.append(1))
        node.subscribe(lambda: log.append(2))
        node.subscribe(lambda: log.append(3))
        node.notify_descendants()
        assert log == [1, 2, 3]

    def test_notify_does_not_change_state(self):
        store = create_store(_counter, 0)
        node = SubscriptionNode(store)
        before = store.get_state()
        node.notify_descendants()
        assert store.get_state() is before

    def test_siblings_isolated(self):
        store = create_store(_counter, 0)
        left, right = SubscriptionNode(store), SubscriptionNode(store)
        log = []
        left.subscribe(lambda: log.append("left"))
        right.subscribe(lambda: log.append("right"))
        left.notify_descendants()
        assert log == ["left"]

    def test_unsubscribe(self):
        node = SubscriptionNode(create_store(_counter, 0))
        log = []
        unsubscribe = node.subscribe(lambda: log.append(1))
        unsubscribe()
        node.notify_descendants()
        assert log == []
        assert node.listener_count == 0

    def test_clear_makes_unsubscribe_noop(self):
        node = SubscriptionNode(create_store(_counter, 0))
        unsubscribe = node.subscribe(lambda: None)
        node.clear()
        assert node.listener_count == 0
        unsubscribe()  # no error

    def test_rejects_non_callable(self):
        node = SubscriptionNode(create_store(_counter, 0))
        with pytest.raises(TypeError):
            node.subscribe("not a listener")
