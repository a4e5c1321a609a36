"""Tests for TemplateCompiler."""

from types import SimpleNamespace

import pytest

from tagql import CompilerConfig, OperationType, TemplateCompiler, TemplateError

GREETING = ("query Greeting { hello }",)

DOCUMENT = (
    """
    query GetUser($id: ID!) {
      user(id: $id) { ...UserFields }
    }
    mutation Rename($id: ID!, $name: String!) {
      rename(id: $id, name: $name) { id }
    }
    fragment UserFields on User {
      id
      name
    }
    """,
)


@pytest.fixture
def compiler() -> TemplateCompiler:
    """Create a compiler for testing."""
    return TemplateCompiler()


class TestMemoization:
    """Tests for memoization by segments identity."""

    def test_same_segments_same_factory(self, compiler: TemplateCompiler) -> None:
        assert compiler.compile(GREETING) is compiler.compile(GREETING)

    def test_equal_segments_different_identity(
        self, compiler: TemplateCompiler
    ) -> None:
        first = compiler.compile(["query Greeting { hello }"])
        second = compiler.compile(["query Greeting { hello }"])

        assert first is not second

    def test_plain_strings_memoized_by_value(
        self, compiler: TemplateCompiler
    ) -> None:
        first = compiler.compile("".join(["query A ", "{ a }"]))
        second = compiler.compile("".join(["query A { ", "a }"]))

        assert first is second

    def test_values_captured_on_first_compile(
        self, compiler: TemplateCompiler
    ) -> None:
        segments = ("query A { items(first: ", ") { id } }")

        first = compiler.compile(segments, (10,))
        second = compiler.compile(segments, (20,))

        assert first is second
        assert "items(first: 10)" in second["A"]().query

    def test_lru_bound(self) -> None:
        compiler = TemplateCompiler(CompilerConfig(maxsize=1))
        first_segments = ["query A { a }"]
        second_segments = ["query B { b }"]

        first = compiler.compile(first_segments)
        compiler.compile(second_segments)

        assert len(compiler) == 1
        assert compiler.compile(first_segments) is not first

    def test_clear(self, compiler: TemplateCompiler) -> None:
        first = compiler.compile(GREETING)
        compiler.clear()

        assert len(compiler) == 0
        assert compiler.compile(GREETING) is not first

    def test_invalid_maxsize(self) -> None:
        with pytest.raises(ValueError):
            CompilerConfig(maxsize=0)


class TestDefinitions:
    """Tests for splitting templates into named operations."""

    def test_named_members(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(DOCUMENT)

        assert factory.names == ["GetUser", "Rename", "UserFields"]
        assert factory.operations == ["GetUser", "Rename"]
        assert factory.fragments == ["UserFields"]
        assert "Rename" in factory
        assert "Missing" not in factory

    def test_member_types(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(DOCUMENT)

        assert factory["GetUser"]().type is OperationType.QUERY
        assert factory["Rename"]().type is OperationType.MUTATION
        assert factory["UserFields"]().type is OperationType.FRAGMENT

    def test_member_operation_fields(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(DOCUMENT)
        variables = {"id": "1", "name": "Ada"}

        operation = factory["Rename"](variables)

        assert operation.operation_name == "Rename"
        assert operation.variables is variables
        assert operation.key is factory.template
        assert operation.query.strip().startswith("mutation Rename")
        assert "GetUser" not in operation.query

    def test_missing_member_raises_key_error(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(DOCUMENT)

        with pytest.raises(KeyError):
            factory["Missing"]
        assert factory.get("Missing") is None

    def test_fragment_appended_to_operation(
        self, compiler: TemplateCompiler
    ) -> None:
        query = compiler.compile(DOCUMENT)["GetUser"]().query

        assert "...UserFields" in query
        assert query.count("fragment UserFields on User") == 1

    def test_operation_without_spread_has_no_fragment(
        self, compiler: TemplateCompiler
    ) -> None:
        query = compiler.compile(DOCUMENT)["Rename"]().query

        assert "fragment UserFields" not in query

    def test_fragments_referencing_fragments(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(
            (
                "query Feed { posts { ...PostFields } } "
                "fragment PostFields on Post { title author { ...Author } } "
                "fragment Author on User { name }",
            )
        )

        query = factory["Feed"]().query

        assert "fragment PostFields on Post" in query
        assert query.count("fragment Author on User") == 1

    def test_fragment_defined_before_operation(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(
            ("fragment Author on User { name } query Feed { me { ...Author } }",)
        )

        query = factory["Feed"]().query

        assert query.count("fragment Author on User") == 1
        assert query.index("query Feed") < query.index("fragment Author")

    def test_descriptors(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(DOCUMENT)
        kinds = [descriptor.kind for descriptor in factory.descriptors]

        assert kinds == [
            OperationType.QUERY,
            OperationType.MUTATION,
            OperationType.FRAGMENT,
        ]
        assert factory.descriptors[-1].end_index == len(factory.template.text)

    def test_nested_field_named_like_keyword(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(("query Search { query { results } }",))

        assert factory.names == ["Search"]

    def test_anonymous_template(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(("{ hello }",))

        operation = factory()

        assert len(factory) == 0
        assert operation.type is OperationType.QUERY
        assert operation.operation_name is None
        assert operation.query == "{ hello }"

    def test_anonymous_operation_has_no_member(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(("query ($id: ID) { node(id: $id) { id } }",))

        assert factory.names == []
        assert factory().type is OperationType.QUERY

    def test_default_call_renders_whole_template(
        self, compiler: TemplateCompiler
    ) -> None:
        factory = compiler.compile(DOCUMENT)

        operation = factory({"id": "1"})

        assert operation.operation_name == "GetUser"
        assert "mutation Rename" in operation.query
        assert operation.variables == {"id": "1"}

    def test_default_variables(self, compiler: TemplateCompiler) -> None:
        assert compiler.compile(GREETING)().variables == {}

    def test_interpolated_name(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(("query ", " { hello }"), ("Greeting",))

        operation = factory()

        assert factory.names == ["Greeting"]
        assert operation.operation_name == "Greeting"
        assert operation.query == "query Greeting { hello }"
        assert factory["Greeting"]().query == "query Greeting { hello }"

    def test_dynamic_name_keeps_kind(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(
            ("mutation ", "($id: ID!) { like(id: $id) { id } }"),
            (lambda variables: "Like",),
        )

        operation = factory({"id": "1"})

        assert factory.names == []
        assert operation.type is OperationType.MUTATION
        assert operation.query.startswith("mutation Like($id: ID!)")

    def test_interpolated_fragment_name(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(
            ("query Feed { ...Author }\nfragment ", " on User { name }"),
            ("Author",),
        )

        assert factory.fragments == ["Author"]
        assert "fragment Author on User" in factory["Feed"]().query


class TestInterpolation:
    """Tests for values interpolated into templates."""

    def test_scalar_value(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(
            ("query Sorted { items(order: ", ") { id } }"), ("DESC",)
        )

        assert "items(order: DESC)" in factory["Sorted"]().query

    def test_callable_receives_variables(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(
            ("query Page { items(first: ", ") { id } }"),
            (lambda variables: variables["size"] * 2,),
        )

        operation = factory["Page"]({"size": 5})

        assert "items(first: 10)" in operation.query

    def test_interpolated_fragment(self, compiler: TemplateCompiler) -> None:
        fragment = compiler.compile(("fragment UserFields on User { id name }",))
        factory = compiler.compile(
            ("query Me { me { ...", " } }"),
            (fragment["UserFields"],),
        )

        query = factory["Me"]().query

        assert "...UserFields" in query
        assert query.count("fragment UserFields on User { id name }") == 1

    def test_interpolated_fragment_spread_twice(
        self, compiler: TemplateCompiler
    ) -> None:
        fragment = compiler.compile(("fragment UserFields on User { id }",))
        factory = compiler.compile(
            ("query Pair { a: me { ...", " } b: me { ...", " } }"),
            (fragment["UserFields"], fragment["UserFields"]),
        )

        query = factory["Pair"]().query

        assert query.count("...UserFields") == 2
        assert query.count("fragment UserFields on User") == 1

    def test_interpolated_factory(self, compiler: TemplateCompiler) -> None:
        fragment = compiler.compile(("fragment UserFields on User { id }",))
        factory = compiler.compile(("query Me { me { ...", " } }"), (fragment,))

        assert "fragment UserFields on User" in factory["Me"]().query

    def test_fragment_registered_without_spread(
        self, compiler: TemplateCompiler
    ) -> None:
        fragment = compiler.compile(("fragment UserFields on User { id }",))
        factory = compiler.compile(
            ("query Me { me { ...UserFields } } ", ""),
            (fragment["UserFields"],),
        )

        query = factory["Me"]().query

        assert query.count("fragment UserFields on User") == 1

    def test_none_value(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(("query A { a ", " }"), (None,))

        assert factory["A"]().query == "query A { a  }"

    def test_template_object(self, compiler: TemplateCompiler) -> None:
        template = SimpleNamespace(
            strings=("query A { items(first: ", ") { id } }"),
            values=(3,),
        )

        factory = compiler.compile(template)

        assert "items(first: 3)" in factory["A"]().query

    def test_segment_value_mismatch(self, compiler: TemplateCompiler) -> None:
        with pytest.raises(TemplateError):
            compiler.compile(("query A { a }", "extra"), ())

    def test_no_markers_left(self, compiler: TemplateCompiler) -> None:
        factory = compiler.compile(
            ("query A($n: Int) { a(n: ", ", m: ", ") }"), (1, "x")
        )

        query = factory["A"]().query

        assert "\x00" not in query
        assert "\x01" not in query
