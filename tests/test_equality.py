"""Tests for shallow_equal."""

from storefx import shallow_equal


class TestShallowEqual:
    def test_same_object(self):
        x = {"a": [1, 2]}
        assert shallow_equal(x, x)
        items = [1, 2]
        assert shallow_equal(items, items)

    def test_equal_flat_dicts(self):
        assert shallow_equal({"a": 1, "b": 2}, {"a": 1, "b": 2})

    def test_key_order_irrelevant(self):
        assert shallow_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_nested_dict_compared_by_reference(self):
        assert not shallow_equal({"a": 1, "b": {}}, {"a": 1, "b": {}})

    def test_shared_nested_value(self):
        todos = [{"id": "a"}]
        assert shallow_equal({"todos": todos}, {"todos": todos})

    def test_different_values(self):
        assert not shallow_equal({"a": 1}, {"a": 2})

    def test_different_keys(self):
        assert not shallow_equal({"a": 1}, {"b": 1})
        assert not shallow_equal({"a": 1}, {"a": 1, "b": 2})

    def test_strings_compare_by_value(self):
        left = {"name": "".join(["to", "do"])}
        right = {"name": "todo"}
        assert shallow_equal(left, right)

    def test_numeric_types_not_mixed(self):
        assert not shallow_equal({"a": 1}, {"a": 1.0})
        assert not shallow_equal({"a": 1}, {"a": True})

    def test_none_values(self):
        assert shallow_equal({"a": None}, {"a": None})

    def test_non_mappings_degrade_to_identity(self):
        assert not shallow_equal([1, 2], [1, 2])
        assert not shallow_equal({"a": 1}, [("a", 1)])

    def test_scalars(self):
        assert shallow_equal(2, 2)
        assert not shallow_equal(2, 1)
        assert shallow_equal(None, None)
