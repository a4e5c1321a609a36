"""Operation value object."""

import json
import re
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

from tagql.utils.hashing import normalize_query

# Shared cache namespace for every ad-hoc query string
BARE_QUERY_NAMESPACE = "__bare_query__"

_LEADING_KEYWORD = re.compile(r"^\s*(query|mutation|subscription|fragment)\b")
_LEADING_NAME = re.compile(
    r"^\s*(?:query|mutation|subscription|fragment)\s+([_A-Za-z][_0-9A-Za-z]*)"
)

# encodeURIComponent leaves these unescaped as well
_URI_SAFE = "!*'()"


class OperationType(str, Enum):
    """GraphQL operation kinds, plus fragments."""

    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"
    FRAGMENT = "fragment"


@dataclass(frozen=True)
class Operation:
    """One compiled, fully interpolated GraphQL request.

    Operations are created fresh on every factory call and never mutated.
    ``key`` is the identity of the compiled template that produced the
    operation and is used by the dispatcher as the cache namespace.

    Iterating an operation yields ``(field, value)`` pairs, so
    ``dict(operation)`` gives the wire field names::

        {"query": "...", "variables": {...}, "operationName": "GetUser"}
    """

    query: str
    variables: dict[str, Any] = field(default_factory=dict)
    operation_name: str | None = None
    type: OperationType = OperationType.QUERY
    key: Hashable = BARE_QUERY_NAMESPACE

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        yield "query", self.query
        yield "variables", self.variables
        if self.operation_name:
            yield "operationName", self.operation_name

    def __str__(self) -> str:
        return self.to_query_string()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for JSON serialization."""
        return dict(self)

    def to_query_string(self) -> str:
        """Serialize for a GET request.

        Returns:
            ``query=...&variables=...`` with ``&operationName=...`` appended
            when the operation is named. The query text is whitespace
            collapsed before encoding.
        """
        parts = [
            f"query={quote(normalize_query(self.query), safe=_URI_SAFE)}",
            "variables="
            + quote(
                json.dumps(self.variables, separators=(",", ":")),
                safe=_URI_SAFE,
            ),
        ]
        if self.operation_name:
            parts.append(
                f"operationName={quote(self.operation_name, safe=_URI_SAFE)}"
            )
        return "&".join(parts)

    @property
    def is_fragment(self) -> bool:
        return self.type is OperationType.FRAGMENT

    @classmethod
    def from_query(
        cls,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> "Operation":
        """Build an ad-hoc operation from a bare query string.

        The operation type and name are read from the leading keyword, if
        any. Every bare query shares ``BARE_QUERY_NAMESPACE``.

        Args:
            query: The GraphQL document.
            variables: Optional variables for the request.

        Returns:
            A new Operation instance.
        """
        match = _LEADING_KEYWORD.match(query)
        op_type = OperationType(match.group(1)) if match else OperationType.QUERY
        name_match = _LEADING_NAME.match(query)

        return cls(
            query=query,
            variables=variables or {},
            operation_name=name_match.group(1) if name_match else None,
            type=op_type,
            key=BARE_QUERY_NAMESPACE,
        )
