"""Cache-aware dispatcher - sends operations and caches their results."""

import asyncio
import inspect
import json
import logging
from collections.abc import Callable, Hashable, Mapping, MutableMapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from tagql.core.entities.config import DispatcherConfig
from tagql.core.entities.dispatch import (
    Callback,
    CacheDirective,
    DispatchOptions,
    DispatchResult,
    TransportRequest,
)
from tagql.core.entities.operation import Operation, OperationType
from tagql.core.interfaces.cache_store import ICacheStore
from tagql.core.interfaces.key_builder import IKeyBuilder
from tagql.core.interfaces.transport import ITransport
from tagql.infrastructure.key_builders.default import DefaultKeyBuilder
from tagql.infrastructure.stores.memory import InMemoryCacheStore
from tagql.infrastructure.transports.httpx import HttpxTransport

logger = logging.getLogger(__name__)

Slot = tuple[Hashable, Hashable]
_InFlight = tuple["asyncio.Task[DispatchResult]", Any, Any]


class Dispatcher:
    """Dispatches operations to a GraphQL endpoint through a result cache.

    ``dispatch`` is synchronous: it returns the best result known right
    now and schedules the transport call on the running event loop when
    the cache cannot answer. Results are cached per operation namespace
    (the compiled template) and per inner key (derived from the
    variables).

    Example:
        dispatcher = Dispatcher("https://api.example.com/graphql")
        result = dispatcher(factory["GetUser"]({"id": "1"}))
        if result.is_pending:
            result = await result.wait()
    """

    def __init__(
        self,
        endpoint: str,
        cache: ICacheStore | MutableMapping[Hashable, Any] | None = None,
        transport: ITransport | None = None,
        key_builder: IKeyBuilder | None = None,
        config: DispatcherConfig | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            endpoint: GraphQL endpoint URL. May carry its own query string.
            cache: Cache store, or a plain ``namespace -> key -> value``
                mapping to share state with other dispatchers.
            transport: Async transport. Defaults to HttpxTransport.
            key_builder: Builds inner cache keys from variables.
            config: Optional dispatcher configuration.
        """
        self._endpoint = endpoint
        self._config = config or DispatcherConfig()

        if cache is None:
            cache = InMemoryCacheStore(maxsize=self._config.cache_maxsize)
        elif isinstance(cache, MutableMapping):
            cache = InMemoryCacheStore(data=cache)
        self._store: ICacheStore = cache

        self._owns_transport = transport is None
        self._transport: ITransport = transport or HttpxTransport(
            timeout=self._config.timeout
        )
        self._key_builder = key_builder or DefaultKeyBuilder()

        # In-flight cache reads with their parse and key options; joined by
        # dispatches of the same slot that pass the same options
        self._in_flight: dict[Slot, _InFlight] = {}
        # Per-slot successful write counters, kept while requests are pending
        self._generations: dict[Slot, int] = {}
        self._pending: dict[Slot, int] = {}

        # Statistics
        self._hits = 0
        self._misses = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    @property
    def cache(self) -> ICacheStore:
        return self._store

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "total": self._hits + self._misses,
        }

    def __call__(
        self,
        operation: Operation | str,
        options: DispatchOptions | Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> DispatchResult:
        return self.dispatch(operation, options, callback)

    def dispatch(
        self,
        operation: Operation | str,
        options: DispatchOptions | Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> DispatchResult:
        """Return the best known result for an operation.

        Args:
            operation: A compiled Operation or a bare query string.
            options: Dispatch options, as DispatchOptions or a mapping.
            callback: Called once with ``(error, value)`` when a transport
                call issued or joined by this dispatch completes.

        Returns:
            RESOLVED with the cached value when the cache answers, PENDING
            with the best known value while a fetch is in flight, or
            ERRORED when the request could not be encoded.

        Raises:
            RuntimeError: If a fetch is needed outside a running event loop.
        """
        opts = DispatchOptions.coerce(options)
        op = (
            operation
            if isinstance(operation, Operation)
            else Operation.from_query(operation, opts.variables)
        )
        namespace = op.key
        key = self._resolve_key(op, opts)

        use_cache = (
            opts.body is None
            and op.type is not OperationType.MUTATION
            and not opts.bypasses_cache
        )

        cached = self._store.get(namespace, key)
        mutated = False
        if opts.mutate is not None:
            cached = opts.mutate(cached)
            self._store.set(namespace, key, cached)
            mutated = True

        if cached is not None and (use_cache or mutated):
            self._hits += 1
            logger.debug("Cache hit for %s in %r", key, namespace)
            return DispatchResult.resolved(cached, key)

        self._misses += 1
        best_known = cached if cached is not None else {}

        if opts.cache == CacheDirective.ONLY_IF_CACHED.value:
            logger.debug("Cache miss for %s with only-if-cached", key)
            return DispatchResult.pending(best_known, key)

        slot = (namespace, key)
        if use_cache and self._config.coalesce_requests:
            in_flight = self._in_flight.get(slot)
            if (
                in_flight is not None
                and not in_flight[0].done()
                and in_flight[1] is opts.parse
                and in_flight[2] == opts.key
            ):
                task = in_flight[0]
                logger.debug("Joining in-flight request for %s", key)
                if callback is not None:
                    task.add_done_callback(_notifier(callback))
                return DispatchResult.pending(best_known, key, task)

        try:
            request = self._build_request(op, opts)
        except (TypeError, ValueError) as e:
            logger.warning("Could not encode %s: %s", op.operation_name or key, e)
            if callback is not None:
                callback(e, None)
            return DispatchResult.errored(e, key)

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._fetch(op, opts, request, key, callback))
        if use_cache:
            self._in_flight[slot] = (task, opts.parse, opts.key)

        return DispatchResult.pending(best_known, key, task)

    async def fetch(
        self,
        operation: Operation | str,
        options: DispatchOptions | Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> DispatchResult:
        """Dispatch and wait for the final result."""
        return await self.dispatch(operation, options, callback).wait()

    def clear(self) -> None:
        """Clear every cached result and reset statistics."""
        self._store.clear()
        self._hits = 0
        self._misses = 0

    async def aclose(self) -> None:
        """Close the default transport, if this dispatcher created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    def _resolve_key(self, op: Operation, opts: DispatchOptions) -> Hashable:
        if opts.key is None:
            return self._key_builder.build(op.variables, op.query)
        if callable(opts.key):
            return opts.key(op.variables)
        return opts.key

    def _build_request(
        self,
        op: Operation,
        opts: DispatchOptions,
    ) -> TransportRequest:
        headers = dict(self._config.default_headers)
        body = opts.body

        get_url = _append_query(self._endpoint, op.to_query_string())
        use_post = (
            body is not None
            or op.type is OperationType.MUTATION
            or len(get_url) >= self._config.max_url_length
        )

        if use_post:
            url, method = self._endpoint, "POST"
            if body is None:
                body = json.dumps(op.to_dict())
                headers["Content-Type"] = "application/json"
        else:
            url, method = get_url, "GET"

        if opts.method:
            method = opts.method.upper()
        headers.update(opts.headers)

        return TransportRequest(
            url=url,
            method=method,
            headers=headers,
            body=body,
            cache=opts.cache,
        )

    async def _fetch(
        self,
        op: Operation,
        opts: DispatchOptions,
        request: TransportRequest,
        key: Hashable,
        callback: Callback | None,
    ) -> DispatchResult:
        namespace = op.key
        slot = (namespace, key)
        generation = self._begin(slot)

        try:
            try:
                response = await self._transport(request)
                if callable(opts.key) and _accepts_response(opts.key):
                    key = opts.key(op.variables, response)

                value = response
                if opts.parse is not None:
                    value = opts.parse(response, self._store.get(namespace, key))
            except Exception as e:
                # Keep results written by requests that succeeded meanwhile
                if self._generations.get(slot) == generation:
                    self._store.delete(*slot)
                logger.warning(
                    "Request for %s failed: %s", op.operation_name or key, e
                )
                if callback is not None:
                    callback(e, None)
                return DispatchResult.errored(e, slot[1])

            if opts.cache != CacheDirective.NO_STORE.value:
                self._store.set(namespace, key, value)
                self._bump((namespace, key))

            if callback is not None:
                callback(None, value)
            return DispatchResult.resolved(value, key)
        finally:
            self._end(slot)
            in_flight = self._in_flight.get(slot)
            if in_flight is not None and in_flight[0] is asyncio.current_task():
                del self._in_flight[slot]

    def _begin(self, slot: Slot) -> int:
        self._pending[slot] = self._pending.get(slot, 0) + 1
        return self._generations.setdefault(slot, 0)

    def _bump(self, slot: Slot) -> None:
        if slot in self._generations:
            self._generations[slot] += 1

    def _end(self, slot: Slot) -> None:
        remaining = self._pending[slot] - 1
        if remaining:
            self._pending[slot] = remaining
        else:
            del self._pending[slot]
            del self._generations[slot]


def create_dispatcher(
    endpoint: str,
    cache: ICacheStore | MutableMapping[Hashable, Any] | None = None,
    transport: ITransport | None = None,
    **kwargs: Any,
) -> Dispatcher:
    """Create a dispatcher for an endpoint.

    Args:
        endpoint: GraphQL endpoint URL.
        cache: Optional cache store or mapping.
        transport: Optional transport.
        **kwargs: Passed to DispatcherConfig.

    Returns:
        A new Dispatcher.
    """
    config = DispatcherConfig(**kwargs) if kwargs else None
    return Dispatcher(endpoint, cache=cache, transport=transport, config=config)


def _append_query(url: str, query_string: str) -> str:
    parts = urlsplit(url)
    query = f"{parts.query}&{query_string}" if parts.query else query_string
    return urlunsplit(parts._replace(query=query))


def _notifier(
    callback: Callback,
) -> Callable[["asyncio.Task[DispatchResult]"], None]:
    def notify(task: "asyncio.Task[DispatchResult]") -> None:
        if task.cancelled():
            callback(asyncio.CancelledError(), None)
            return
        error = task.exception()
        if error is not None:
            callback(error, None)
            return
        result = task.result()
        callback(result.error, result.value)

    return notify


def _accepts_response(key: Callable[..., Hashable]) -> bool:
    """Whether a key function takes the response as a second argument."""
    try:
        signature = inspect.signature(key)
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2
