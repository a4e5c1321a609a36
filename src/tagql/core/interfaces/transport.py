"""Transport interface."""

from typing import Any, Protocol

from tagql.core.entities.dispatch import TransportRequest


class TransportError(Exception):
    """Raised by transports when a request cannot be completed."""

    pass


class ITransport(Protocol):
    """Contract for request transports.

    A transport performs exactly one network call per invocation and
    returns the parsed response body. Timeouts, retries and cancellation
    are the transport's concern.
    """

    async def __call__(self, request: TransportRequest) -> Any:
        """Send a request.

        Args:
            request: The encoded request.

        Returns:
            The parsed response body.

        Raises:
            TransportError: If the request failed.
        """
        ...
