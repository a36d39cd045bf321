"""Abstract base transport and error types."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable

from mcp_http.transport.types import TransportConfig, TransportEvent, TransportResult

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Base exception for transport errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConnectionError(TransportError):
    """Failed to establish connection to server."""

    pass


class TimeoutError(TransportError):
    """Request or connection timed out."""

    pass


class SessionError(TransportError):
    """Session-related error (not connected, conflicting session id)."""

    pass


class HTTPStatusError(TransportError):
    """Server answered with a status other than 200 or 202."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class MalformedResponseError(TransportError):
    """A 200 response body was not a single JSON-RPC envelope."""

    def __init__(self, message: str, body: bytes = b"", cause: Exception | None = None):
        super().__init__(f"Failed to parse response: {message}", cause=cause)
        self.body = body


class Transport(ABC):
    """
    Abstract base class for MCP transports.

    A transport performs exactly one exchange per send(): it serializes
    the message, delivers it, and hands back the raw status, headers and
    body. Interpreting the result is the caller's job.
    """

    def __init__(self, config: TransportConfig):
        self.config = config
        self._event_handlers: list[Callable[[TransportEvent], None]] = []

    def on_event(self, handler: Callable[[TransportEvent], None]) -> None:
        """
        Register an event handler for transport events.

        Args:
            handler: Callback invoked when transport events occur.
        """
        self._event_handlers.append(handler)

    def _emit_event(self, event: TransportEvent) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Transport event handler failed for {event}")

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the transport for exchanges. Safe to call repeatedly.

        Raises:
            ConnectionError: If the transport cannot be initialized.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Release all held connections.

        This method should be safe to call multiple times.
        """
        pass

    @abstractmethod
    async def send(
        self,
        message: dict[str, Any],
        headers: Mapping[str, str],
    ) -> TransportResult:
        """
        Perform one exchange carrying a JSON-RPC message.

        Args:
            message: JSON-RPC envelope (request or notification).
            headers: Protocol headers for this exchange.

        Returns:
            Status code, response headers and raw body.

        Raises:
            TransportError: If the exchange could not be completed.
            SessionError: If the transport is not connected.
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """
        Check if transport is currently connected.

        Returns:
            True if connected and ready for communication.
        """
        pass

    async def __aenter__(self) -> "Transport":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
