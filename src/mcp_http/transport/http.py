"""HTTP POST transport implementation for MCP."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

import httpx

from mcp_http.lib import oj
from mcp_http.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
)
from mcp_http.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
    TransportResult,
)


class HTTPTransport(Transport):
    """
    Unary HTTP POST transport.

    Each message is one POST to the configured URL. The response is
    returned as-is; SSE upgrades are not consumed.
    """

    def __init__(self, config: TransportConfig):
        super().__init__(config)
        self._client: httpx.AsyncClient | None = None
        self._connected: bool = False
        self._request_semaphore: asyncio.Semaphore | None = None
        self._closing: bool = False

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._connected:
            return

        self._emit_event(
            TransportEvent(
                type=TransportEventType.CONNECTING,
                timestamp=time.time(),
                data={"url": self.config.url},
            )
        )

        try:
            timeout = httpx.Timeout(
                connect=self.config.connect_timeout,
                read=self.config.timeout,
                write=self.config.timeout,
                pool=self.config.timeout,
            )

            # Don't use base_url as httpx adds trailing slashes which break some servers
            self._client = httpx.AsyncClient(
                timeout=timeout,
                headers=self.config.headers,
                verify=self.config.verify_ssl,
                http2=False,
            )

            self._request_semaphore = asyncio.Semaphore(
                self.config.max_concurrent_requests
            )
            self._connected = True
            self._closing = False

            self._emit_event(
                TransportEvent(
                    type=TransportEventType.CONNECTED,
                    timestamp=time.time(),
                )
            )

        except Exception as e:
            raise ConnectionError(f"Failed to initialize HTTP client: {e}", cause=e)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if not self._connected and self._client is None:
            return

        self._closing = True

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTING,
                timestamp=time.time(),
            )
        )

        if self._client:
            await self._client.aclose()
            self._client = None

        self._connected = False

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTED,
                timestamp=time.time(),
            )
        )

    async def send(
        self,
        message: dict[str, Any],
        headers: Mapping[str, str],
    ) -> TransportResult:
        """POST one JSON-RPC message and return the raw exchange result."""
        if not self._client or not self._connected:
            raise SessionError("Transport not connected")

        if self._closing:
            raise SessionError("Transport is closing")

        if self._request_semaphore:
            await self._request_semaphore.acquire()

        try:
            return await self._send_internal(message, headers)
        finally:
            if self._request_semaphore:
                self._request_semaphore.release()

    async def _send_internal(
        self,
        message: dict[str, Any],
        headers: Mapping[str, str],
    ) -> TransportResult:
        body = oj.dumps(message)

        self._emit_event(
            TransportEvent(
                type=TransportEventType.MESSAGE_SENT,
                timestamp=time.time(),
                data={"method": message.get("method"), "id": message.get("id")},
            )
        )

        try:
            response = await self._client.post(
                self.config.url,
                content=body,
                headers=dict(headers),
            )
        except httpx.TimeoutException as e:
            self._emit_error(e)
            raise TimeoutError(f"Request timed out: {e}", cause=e)
        except httpx.HTTPError as e:
            self._emit_error(e)
            raise TransportError(f"HTTP error: {e}", cause=e)

        result = TransportResult(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )

        self._emit_event(
            TransportEvent(
                type=TransportEventType.MESSAGE_RECEIVED,
                timestamp=time.time(),
                data={"status": response.status_code, "id": message.get("id")},
            )
        )

        return result

    def _emit_error(self, error: Exception) -> None:
        self._emit_event(
            TransportEvent(
                type=TransportEventType.ERROR,
                timestamp=time.time(),
                error=error,
            )
        )

    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._connected and not self._closing
