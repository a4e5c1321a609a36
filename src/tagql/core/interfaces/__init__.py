"""Core interfaces (Protocol classes) for tagql."""

from tagql.core.interfaces.cache_store import ICacheStore
from tagql.core.interfaces.key_builder import IKeyBuilder
from tagql.core.interfaces.transport import ITransport, TransportError

__all__ = [
    "ICacheStore",
    "IKeyBuilder",
    "ITransport",
    "TransportError",
]
