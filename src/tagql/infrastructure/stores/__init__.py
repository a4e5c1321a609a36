"""Cache store implementations."""

from tagql.infrastructure.stores.memory import InMemoryCacheStore

__all__ = ["InMemoryCacheStore"]
