"""Digest and query text helpers used when encoding requests and keys."""

import hashlib
import json
from typing import Any


def hash_value(value: Any) -> str:
    """Digest operation variables into a short, stable inner cache key.

    Args:
        value: Variables or any other JSON-compatible value. Mapping order
            does not affect the digest.

    Returns:
        The first 16 hex characters of the SHA-256 digest, or ``"none"``
        for ``None``.
    """
    if value is None:
        return "none"

    payload = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


def normalize_query(query: str) -> str:
    """Collapse runs of whitespace in a GraphQL document to single spaces.

    Used before a query is placed in a GET query string.

    Args:
        query: The GraphQL query string.

    Returns:
        The normalized, trimmed query string.
    """
    return " ".join(query.split())
