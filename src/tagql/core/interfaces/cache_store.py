"""Cache store interface."""

from collections.abc import Hashable, MutableMapping
from typing import Any, Protocol


class ICacheStore(Protocol):
    """Contract for two-level cache stores.

    The outer key is a cache namespace (one per compiled template), the
    inner key identifies one request within it. Methods are synchronous:
    the dispatcher reads and writes the store while returning its
    best-known result.
    """

    def get(self, namespace: Hashable, key: Hashable) -> Any | None:
        """Return the cached value, or None if the slot is absent."""
        ...

    def set(self, namespace: Hashable, key: Hashable, value: Any) -> None:
        """Store a value, creating the namespace if needed."""
        ...

    def delete(self, namespace: Hashable, key: Hashable) -> bool:
        """Remove a slot.

        Returns:
            True if the slot existed, False otherwise.
        """
        ...

    def contains(self, namespace: Hashable, key: Hashable) -> bool:
        """Check whether a slot exists."""
        ...

    def namespace(self, namespace: Hashable) -> MutableMapping[Hashable, Any]:
        """Return the inner mapping for a namespace, creating it if needed."""
        ...

    def clear(self) -> None:
        """Drop every namespace."""
        ...
