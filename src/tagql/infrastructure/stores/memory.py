"""In-memory two-level cache store."""

from collections.abc import Hashable, MutableMapping
from typing import Any

from cachetools import LRUCache  # type: ignore[import-untyped]


class InMemoryCacheStore:
    """Namespace -> key -> value store kept in process memory.

    By default namespaces live in a bounded LRU cache, so the caches of
    templates that are no longer used are eventually evicted. Any mutable
    mapping can be injected instead to share state between dispatchers
    or to persist it.
    """

    def __init__(
        self,
        data: MutableMapping[Hashable, Any] | None = None,
        maxsize: int = 1000,
    ) -> None:
        """Initialize the store.

        Args:
            data: Optional outer mapping to use as storage. Its values
                must be mutable mappings (or absent).
            maxsize: Maximum number of namespaces when ``data`` is not given.
        """
        self._data: MutableMapping[Hashable, Any] = (
            data if data is not None else LRUCache(maxsize=maxsize)
        )

    def namespace(self, namespace: Hashable) -> MutableMapping[Hashable, Any]:
        inner = self._data.get(namespace)
        if inner is None:
            inner = {}
            self._data[namespace] = inner
        return inner

    def get(self, namespace: Hashable, key: Hashable) -> Any | None:
        inner = self._data.get(namespace)
        if inner is None:
            return None
        return inner.get(key)

    def set(self, namespace: Hashable, key: Hashable, value: Any) -> None:
        self.namespace(namespace)[key] = value

    def delete(self, namespace: Hashable, key: Hashable) -> bool:
        inner = self._data.get(namespace)
        if inner is None or key not in inner:
            return False
        del inner[key]
        return True

    def contains(self, namespace: Hashable, key: Hashable) -> bool:
        inner = self._data.get(namespace)
        return inner is not None and key in inner

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        """Return the number of namespaces in the store."""
        return len(self._data)

    @property
    def data(self) -> MutableMapping[Hashable, Any]:
        """The underlying outer mapping."""
        return self._data
