"""tagql - GraphQL template compiler with a cache-aware dispatcher.

Templates are compiled once per literal segments object into operation
factories. Operations are dispatched through a pluggable async transport;
results are cached per template and per variable set, and returned
synchronously while a refresh is in flight.

Example:
    from tagql import Dispatcher, gql

    GREETING = ("query Greeting($name: String) { hello(name: $name) }",)
    greeting = gql(GREETING)

    dispatcher = Dispatcher("https://api.example.com/graphql")

    async def main():
        result = dispatcher(greeting["Greeting"]({"name": "world"}))
        print(result.value)            # {} while pending
        result = await result.wait()
        print(result.value)            # {"data": {"hello": "..."}}

Optimistic updates and response reshaping:
    dispatcher(
        operation,
        {
            "mutate": lambda cached: {**(cached or {}), "liked": True},
        },
    )
    dispatcher(operation, {"parse": lambda res, prev: res["data"]})
"""

from tagql.core.entities import (
    BARE_QUERY_NAMESPACE,
    BYPASS_DIRECTIVES,
    CacheDirective,
    CompiledTemplate,
    CompilerConfig,
    DispatcherConfig,
    DispatchOptions,
    DispatchResult,
    DispatchStatus,
    Operation,
    OperationType,
    SubOperation,
    TransportRequest,
)
from tagql.core.interfaces import (
    ICacheStore,
    IKeyBuilder,
    ITransport,
    TransportError,
)
from tagql.core.services import (
    Dispatcher,
    OperationFactory,
    OperationTemplate,
    TemplateCompiler,
    TemplateError,
    create_dispatcher,
    render,
)
from tagql.infrastructure import (
    DefaultKeyBuilder,
    HttpxTransport,
    InMemoryCacheStore,
)
from tagql.tag import configure, get_compiler, gql

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Template tag
    "gql",
    "configure",
    "get_compiler",
    # Core entities
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
    # Core interfaces
    "ICacheStore",
    "IKeyBuilder",
    "ITransport",
    "TransportError",
    # Core services
    "TemplateCompiler",
    "TemplateError",
    "OperationFactory",
    "OperationTemplate",
    "render",
    "Dispatcher",
    "create_dispatcher",
    # Infrastructure implementations
    "InMemoryCacheStore",
    "DefaultKeyBuilder",
    "HttpxTransport",
]
