"""Tests for DefaultKeyBuilder."""

import pytest

from tagql.infrastructure.key_builders.default import DefaultKeyBuilder
from tagql.utils.flatten import flatten

QUERY = "query GetUser($id: ID!) { user(id: $id) { id } }"


class TestDefaultKeyBuilder:
    """Tests for DefaultKeyBuilder."""

    @pytest.fixture
    def key_builder(self) -> DefaultKeyBuilder:
        """Create a key builder for testing."""
        return DefaultKeyBuilder()

    def test_field_order_does_not_matter(self, key_builder: DefaultKeyBuilder) -> None:
        key1 = key_builder.build({"b": 1, "a": {"y": 2, "x": 3}}, QUERY)
        key2 = key_builder.build({"a": {"x": 3, "y": 2}, "b": 1}, QUERY)

        assert key1 == key2

    def test_different_variables_different_key(
        self, key_builder: DefaultKeyBuilder
    ) -> None:
        assert key_builder.build({"id": "1"}, QUERY) != key_builder.build(
            {"id": "2"}, QUERY
        )

    def test_value_types_are_distinguished(
        self, key_builder: DefaultKeyBuilder
    ) -> None:
        assert key_builder.build({"id": "1"}, QUERY) != key_builder.build(
            {"id": 1}, QUERY
        )

    def test_flattened_form(self, key_builder: DefaultKeyBuilder) -> None:
        key = key_builder.build({"b": 1, "a": {"d": [True], "c": None}}, QUERY)

        assert key == "a.c=null&a.d.0=true&b=1"

    def test_no_variables_uses_query(self, key_builder: DefaultKeyBuilder) -> None:
        assert key_builder.build(None, QUERY) == QUERY
        assert key_builder.build({}, QUERY) == QUERY

    def test_prefix(self) -> None:
        key_builder = DefaultKeyBuilder(prefix="users")

        assert key_builder.build({"id": 1}, QUERY) == "users:id=1"

    def test_hash_keys(self) -> None:
        key_builder = DefaultKeyBuilder(hash_keys=True)

        key = key_builder.build({"id": 1}, QUERY)

        assert len(key) == 16
        assert key == key_builder.build({"id": 1}, QUERY)
        assert key != key_builder.build({"id": 2}, QUERY)


class TestFlatten:
    """Tests for dot-path flattening."""

    def test_sorted_paths(self) -> None:
        assert flatten({"b": 1, "a": {"d": [True], "c": None}}) == [
            ("a.c", None),
            ("a.d.0", True),
            ("b", 1),
        ]

    def test_empty_containers_are_leaves(self) -> None:
        assert flatten({"a": {}, "b": []}) == [("a", {}), ("b", [])]

    def test_scalar(self) -> None:
        assert flatten(5) == [("", 5)]
