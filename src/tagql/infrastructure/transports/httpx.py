"""Default transport over httpx."""

import json
import logging
from typing import Any

import httpx

from tagql.core.entities.dispatch import TransportRequest
from tagql.core.interfaces.transport import TransportError

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport sending requests with an ``httpx.AsyncClient``.

    The client is created lazily on first use unless one is injected. An
    injected client is left open for its owner to close.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Optional client to send requests with.
            timeout: Request timeout in seconds for the owned client.
        """
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def __call__(self, request: TransportRequest) -> Any:
        client = self._get_client()
        content = request.body
        if content is not None and not isinstance(content, (str, bytes)):
            content = json.dumps(content)

        logger.debug("%s %s", request.method, request.url)
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=content,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{request.method} {request.url} returned "
                f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Response from {request.url} is not JSON") from e

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
