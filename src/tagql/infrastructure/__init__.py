"""Infrastructure layer implementations for tagql."""

from tagql.infrastructure.key_builders import DefaultKeyBuilder
from tagql.infrastructure.stores import InMemoryCacheStore
from tagql.infrastructure.transports import HttpxTransport

__all__ = [
    "InMemoryCacheStore",
    "DefaultKeyBuilder",
    "HttpxTransport",
]
