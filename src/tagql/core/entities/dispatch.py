"""Dispatch request and result entities."""

import asyncio
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class CacheDirective(str, Enum):
    """Values accepted by the ``cache`` dispatch option.

    Mirrors the fetch ``cache`` modes. Values outside this enum are passed
    through to the transport untouched.
    """

    NO_STORE = "no-store"
    RELOAD = "reload"
    NO_CACHE = "no-cache"
    DEFAULT = "default"
    FORCE_CACHE = "force-cache"
    ONLY_IF_CACHED = "only-if-cached"


# Directives that skip the read-cache path
BYPASS_DIRECTIVES = frozenset(
    {
        CacheDirective.NO_STORE.value,
        CacheDirective.RELOAD.value,
        CacheDirective.NO_CACHE.value,
        CacheDirective.DEFAULT.value,
    }
)

CacheKeyOption = Hashable | Callable[..., Hashable]
MutateHook = Callable[[Any], Any]
ParseHook = Callable[[Any, Any], Any]
Callback = Callable[[BaseException | None, Any], None]


@dataclass
class DispatchOptions:
    """Per-call dispatch options.

    Attributes:
        cache: Cache directive (see CacheDirective) or a pass-through value.
        key: Literal inner cache key, or a callable receiving the variables.
            A callable that accepts a second positional argument is called
            again with the response before the result is stored.
        mutate: Called with the cached value; its return value replaces it.
        parse: Called with ``(response, previous)``; its return value is
            what gets cached and reported.
        method: Overrides the HTTP method chosen by the dispatcher.
        body: Custom request body; disables cache reads.
        headers: Extra headers, merged over the defaults.
        variables: Variables for bare query strings.
    """

    cache: str | None = None
    key: CacheKeyOption | None = None
    mutate: MutateHook | None = None
    parse: ParseHook | None = None
    method: str | None = None
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    variables: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.cache, CacheDirective):
            self.cache = self.cache.value

    @property
    def bypasses_cache(self) -> bool:
        return self.cache in BYPASS_DIRECTIVES

    @classmethod
    def coerce(
        cls, options: "DispatchOptions | Mapping[str, Any] | None"
    ) -> "DispatchOptions":
        """Accept options as an instance, a plain mapping, or None.

        Raises:
            TypeError: If the mapping holds unknown option names.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options

        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise TypeError(f"Unknown dispatch options: {sorted(unknown)}")
        return cls(**dict(options))


class DispatchStatus(Enum):
    """State of a dispatched request."""

    PENDING = "pending"
    RESOLVED = "resolved"
    ERRORED = "errored"


@dataclass(frozen=True)
class DispatchResult:
    """Explicit tri-state result of a dispatch.

    A PENDING result carries the best value known at dispatch time (the
    stale cached value while revalidating, otherwise an empty ``{}``
    placeholder) and the in-flight task. Callers get the outcome of the
    fetch from ``await result.wait()`` rather than from later mutation of
    a returned object.
    """

    status: DispatchStatus
    value: Any = None
    error: BaseException | None = None
    key: Hashable | None = None
    task: "asyncio.Future[DispatchResult] | None" = field(
        default=None, compare=False, repr=False
    )

    @property
    def is_pending(self) -> bool:
        return self.status is DispatchStatus.PENDING

    @property
    def is_resolved(self) -> bool:
        return self.status is DispatchStatus.RESOLVED

    @property
    def is_errored(self) -> bool:
        return self.status is DispatchStatus.ERRORED

    async def wait(self) -> "DispatchResult":
        """Wait for the in-flight fetch, if any, and return its result."""
        if self.task is None:
            return self
        return await self.task

    @classmethod
    def pending(
        cls,
        value: Any,
        key: Hashable | None = None,
        task: "asyncio.Future[DispatchResult] | None" = None,
    ) -> "DispatchResult":
        return cls(DispatchStatus.PENDING, value=value, key=key, task=task)

    @classmethod
    def resolved(cls, value: Any, key: Hashable | None = None) -> "DispatchResult":
        return cls(DispatchStatus.RESOLVED, value=value, key=key)

    @classmethod
    def errored(
        cls, error: BaseException, key: Hashable | None = None
    ) -> "DispatchResult":
        return cls(DispatchStatus.ERRORED, error=error, key=key)


@dataclass(frozen=True)
class TransportRequest:
    """A fully encoded request handed to the transport."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    cache: str | None = None
