"""Key builder interface."""

from typing import Any, Protocol


class IKeyBuilder(Protocol):
    """Contract for building inner cache keys.

    Key builders derive a deterministic key for one request within an
    operation's namespace.
    """

    def build(self, variables: dict[str, Any] | None, query: str) -> str:
        """Build the inner cache key for a request.

        Args:
            variables: Variables passed to the operation.
            query: The rendered query text, used when there are no variables.

        Returns:
            A string key, identical for equal variable sets regardless of
            field order.
        """
        ...
