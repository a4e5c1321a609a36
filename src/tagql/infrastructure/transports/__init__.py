"""Transport implementations."""

from tagql.infrastructure.transports.httpx import HttpxTransport

__all__ = ["HttpxTransport"]
