"""Configuration entities."""

from dataclasses import dataclass, field


@dataclass
class DispatcherConfig:
    """Dispatcher configuration.

    Attributes:
        max_url_length: GET requests whose full URL would reach this length
            are sent as POST with a JSON body instead.
        default_headers: Headers sent with every request.
        timeout: Request timeout in seconds for the default transport.
        cache_maxsize: Maximum number of namespaces kept by the default
            in-memory store.
        coalesce_requests: Share one in-flight transport call between
            cache-reading dispatches for the same namespace and key. A
            dispatch only joins a call started with the same ``parse`` hook
            and ``key`` option; otherwise it sends its own request.
    """

    max_url_length: int = 2000
    default_headers: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    cache_maxsize: int = 1000
    coalesce_requests: bool = True

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.max_url_length <= 0:
            raise ValueError("max_url_length must be positive")
        if self.cache_maxsize <= 0:
            raise ValueError("cache_maxsize must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


@dataclass
class CompilerConfig:
    """Template compiler configuration.

    Attributes:
        maxsize: Maximum number of compiled templates memoized at once.
            Least recently used templates are evicted past this bound.
    """

    maxsize: int = 512

    def __post_init__(self) -> None:
        if self.maxsize <= 0:
            raise ValueError("maxsize must be positive")
