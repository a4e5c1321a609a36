"""Default key builder implementation."""

import json
from typing import Any

from tagql.utils.flatten import flatten
from tagql.utils.hashing import hash_value


class DefaultKeyBuilder:
    """Key builder using a key-sorted dot-path flattening of the variables.

    ``{"b": 1, "a": {"id": "x"}}`` becomes ``a.id="x"&b=1``, so two variable
    sets produce the same key exactly when they hold the same data. Without
    variables the raw query text is the key.
    """

    def __init__(self, prefix: str = "", hash_keys: bool = False) -> None:
        """Initialize the key builder.

        Args:
            prefix: Optional prefix for every key.
            hash_keys: Replace the flattened form with its SHA-256 digest.
        """
        self._prefix = prefix
        self._hash_keys = hash_keys

    def build(self, variables: dict[str, Any] | None, query: str) -> str:
        if variables:
            key = self.serialize(variables)
        else:
            key = query

        if self._hash_keys:
            key = hash_value(key)

        return f"{self._prefix}:{key}" if self._prefix else key

    @staticmethod
    def serialize(variables: dict[str, Any]) -> str:
        """Serialize variables into their deterministic flattened form."""
        return "&".join(
            f"{path}={json.dumps(leaf, separators=(',', ':'), sort_keys=True, default=str)}"
            for path, leaf in flatten(variables)
        )
