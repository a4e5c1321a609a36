"""Module-level template tag.

``gql`` compiles with a process-wide TemplateCompiler, so factories are
memoized across the whole application. Call ``configure`` to replace the
compiler, e.g. to change the memo bound.
"""

from typing import Any

from tagql.core.services.compiler import OperationFactory, TemplateCompiler

# Module-level compiler reference
_compiler: TemplateCompiler = TemplateCompiler()


def configure(compiler: TemplateCompiler) -> None:
    """Replace the compiler used by ``gql``.

    Args:
        compiler: The compiler instance to use.

    Example:
        configure(TemplateCompiler(CompilerConfig(maxsize=64)))
    """
    global _compiler
    _compiler = compiler


def get_compiler() -> TemplateCompiler:
    """Get the compiler used by ``gql``."""
    return _compiler


def gql(strings: Any, *values: Any) -> OperationFactory:
    """Compile a GraphQL template.

    Args:
        strings: Literal segments (keep them in a module-level constant so
            the compiled factory is reused), or a plain string.
        *values: Interpolated values, one between each pair of segments.
            Callables receive the operation variables; fragment operations
            are inlined.

    Returns:
        The OperationFactory for the template.

    Example:
        USER_FIELDS = gql("fragment UserFields on User { id name }")

        GET_USER = ("query GetUser($id: ID!) { user(id: $id) { ...", " } }")
        factory = gql(GET_USER, USER_FIELDS["UserFields"])
        operation = factory["GetUser"]({"id": "1"})
    """
    return _compiler.compile(strings, values)
