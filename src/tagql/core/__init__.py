"""Core domain layer for tagql."""

from tagql.core.entities import (
    CompiledTemplate,
    DispatchOptions,
    DispatchResult,
    Operation,
    OperationType,
)
from tagql.core.interfaces import (
    ICacheStore,
    IKeyBuilder,
    ITransport,
    TransportError,
)
from tagql.core.services import Dispatcher, TemplateCompiler

__all__ = [
    # Entities
    "CompiledTemplate",
    "DispatchOptions",
    "DispatchResult",
    "Operation",
    "OperationType",
    # Interfaces
    "ICacheStore",
    "IKeyBuilder",
    "ITransport",
    "TransportError",
    # Services
    "Dispatcher",
    "TemplateCompiler",
]
