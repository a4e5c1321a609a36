"""Domain entities for tagql."""

from tagql.core.entities.config import CompilerConfig, DispatcherConfig
from tagql.core.entities.dispatch import (
    BYPASS_DIRECTIVES,
    CacheDirective,
    DispatchOptions,
    DispatchResult,
    DispatchStatus,
    TransportRequest,
)
from tagql.core.entities.operation import (
    BARE_QUERY_NAMESPACE,
    Operation,
    OperationType,
)
from tagql.core.entities.template import CompiledTemplate, SubOperation

__all__ = [
    "Operation",
    "OperationType",
    "BARE_QUERY_NAMESPACE",
    "CompiledTemplate",
    "SubOperation",
    "CacheDirective",
    "BYPASS_DIRECTIVES",
    "DispatchOptions",
    "DispatchResult",
    "DispatchStatus",
    "TransportRequest",
    "DispatcherConfig",
    "CompilerConfig",
]
