"""MCP protocol client implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Callable

from mcp_http.transport.base import Transport, SessionError
from mcp_http.transport.http import HTTPTransport
from mcp_http.transport.types import TransportConfig
from mcp_http.protocol.correlator import MessageCorrelator
from mcp_http.protocol.dispatcher import MessageHandler, NotificationDispatcher
from mcp_http.protocol.errors import MCPError
from mcp_http.protocol.handshake import (
    DEFAULT_PROTOCOL_VERSION,
    INITIALIZE_METHOD,
    INITIALIZED_NOTIFICATION,
    ClientInfo,
    initialize_params,
)
from mcp_http.protocol.messages import JSONRPCNotification, Message
from mcp_http.protocol.session import SessionConflictPolicy, SessionTracker
from mcp_http.protocol.state import ProtocolState, ProtocolStateMachine

logger = logging.getLogger(__name__)


class MCPClient:
    """
    Core MCP protocol client.

    Sends JSON-RPC requests and notifications over a transport, matches
    responses to their requests by id, carries the server session id,
    and drives the initialize/initialized handshake.

    Requests may be issued concurrently; each resolves with its own
    response regardless of arrival order. Only initialize() is aware of
    the handshake state; sequencing other calls after it is up to the
    caller.
    """

    def __init__(
        self,
        transport: Transport,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        request_timeout: float | None = 60.0,
        session_conflict: SessionConflictPolicy = SessionConflictPolicy.KEEP_FIRST,
        strict_response_ids: bool = False,
    ):
        """
        Initialize MCP client.

        Args:
            transport: Transport layer for communication.
            protocol_version: Version sent in initialize and in the
                MCP-Protocol-Version header until the server negotiates one.
            request_timeout: Default deadline for requests in seconds,
                None to wait indefinitely.
            session_conflict: What to do when the server sends a
                different session id than the one already held.
            strict_response_ids: Fail the exchange when a response id
                matches no pending request instead of dropping it.
        """
        if request_timeout is not None and request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        self.transport = transport
        self.protocol_version = protocol_version
        self.request_timeout = request_timeout
        self.server_info: dict[str, Any] | None = None

        self._state = ProtocolStateMachine()
        self._session = SessionTracker(session_conflict)
        self._dispatcher = NotificationDispatcher()
        self._correlator = MessageCorrelator(
            self._dispatcher,
            strict_response_ids=strict_response_ids,
        )

    @classmethod
    def from_url(
        cls,
        url: str,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> "MCPClient":
        """
        Create a client talking HTTP to a single endpoint.

        Args:
            url: MCP endpoint URL.
            headers: Extra static headers sent with every exchange.
            **kwargs: Passed to MCPClient().
        """
        transport = HTTPTransport(TransportConfig(url=url, headers=dict(headers or {})))
        return cls(transport, **kwargs)

    @property
    def state(self) -> ProtocolState:
        """Current handshake state."""
        return self._state.state

    @property
    def is_ready(self) -> bool:
        """Check if the handshake completed."""
        return self._state.is_ready

    @property
    def session_id(self) -> str | None:
        """Session id assigned by the server, if any."""
        return self._session.session_id

    @property
    def correlator(self) -> MessageCorrelator:
        return self._correlator

    def on_state_change(
        self,
        callback: Callable[[ProtocolState, ProtocolState], None],
    ) -> None:
        """Register callback for state changes."""
        self._state.on_transition(callback)

    def on_message(self, handler: MessageHandler) -> None:
        """
        Register a handler for server-initiated notifications.

        Handlers are called in registration order with the full
        JSONRPCNotification. Coroutine functions are awaited.
        """
        self._dispatcher.register(handler)

    async def connect(self) -> None:
        """Prepare the transport. Called implicitly by the first exchange."""
        if self._state.is_closed:
            raise SessionError("Client is closed")
        await self.transport.connect()

    async def request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Send a request and wait for the response.

        The deadline starts when the request is sent and covers both the
        HTTP exchange and the wait for a matching response.

        Args:
            method: The RPC method name.
            params: Method parameters (sent as {} when omitted).
            timeout: Request deadline (defaults to self.request_timeout).

        Returns:
            The result from the response.

        Raises:
            MCPError: On error response, timeout, or client close.
            TransportError: If the exchange carrying the request failed.
        """
        request, future = self._correlator.create_request(
            method, params if params is not None else {}
        )
        effective_timeout = timeout if timeout is not None else self.request_timeout

        logger.debug(f"Sending {request}")

        try:
            return await asyncio.wait_for(
                self._send_and_wait(request.id, request.to_dict(), future),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Request id={request.id} timed out after {effective_timeout}s")
            raise MCPError.timeout(effective_timeout)
        finally:
            self._correlator.discard(request.id)

    async def _send_and_wait(
        self,
        request_id: int,
        message: dict[str, Any],
        future: asyncio.Future[Any],
    ) -> Any:
        try:
            await self._exchange(message)
        except Exception as e:
            logger.debug(f"Exchange for request id={request_id} failed: {e}")
            self._correlator.reject(request_id, e)

        return await self._correlator.wait(request_id, future)

    async def notify(
        self,
        method: str,
        params: dict[str, Any] | None = None,
    ) -> None:
        """
        Send a notification.

        Completes when the server accepts the exchange. Does not allocate
        a request id.

        Raises:
            TransportError: If the exchange failed.
        """
        notification = JSONRPCNotification(
            method=method,
            params=params if params is not None else {},
        )
        logger.debug(f"Sending {notification}")
        await self._exchange(notification.to_dict())

    async def initialize(
        self,
        client_info: ClientInfo | Mapping[str, Any] | None = None,
        capabilities: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Perform the initialize/initialized handshake.

        Args:
            client_info: Client name and version (ClientInfo or mapping).
            capabilities: Client capabilities to declare.

        Returns:
            The initialize result exactly as the server sent it.

        Raises:
            InvalidStateTransition: If initialize was already attempted.
            MCPError: If the server rejected initialize.
            TransportError: If the exchange failed.
        """
        self._state.transition(ProtocolState.INITIALIZING)

        info = ClientInfo.coerce(client_info)
        result = await self.request(
            INITIALIZE_METHOD,
            initialize_params(self.protocol_version, info, capabilities),
        )

        negotiated = result.get("protocolVersion") if isinstance(result, dict) else None
        if isinstance(negotiated, str) and negotiated:
            if negotiated != self.protocol_version:
                logger.info(
                    f"Server negotiated protocol {negotiated} (requested {self.protocol_version})"
                )
            self.protocol_version = negotiated

        self.server_info = result

        await self.notify(INITIALIZED_NOTIFICATION)
        self._state.transition(ProtocolState.READY)

        server = result.get("serverInfo", {}) if isinstance(result, dict) else {}
        logger.info(
            f"Initialized session with {server.get('name', 'unknown')} "
            f"v{server.get('version', 'unknown')} (protocol {self.protocol_version})"
        )
        return result

    async def list_tools(self, cursor: str | None = None) -> dict[str, Any]:
        """List tools exposed by the server."""
        return await self.request("tools/list", _cursor_params(cursor))

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Invoke a tool by name."""
        return await self.request(
            "tools/call",
            {"name": name, "arguments": arguments or {}},
        )

    async def list_resources(self, cursor: str | None = None) -> dict[str, Any]:
        """List resources exposed by the server."""
        return await self.request("resources/list", _cursor_params(cursor))

    async def read_resource(self, uri: str) -> dict[str, Any]:
        """Read one resource by URI."""
        return await self.request("resources/read", {"uri": uri})

    async def list_prompts(self, cursor: str | None = None) -> dict[str, Any]:
        """List prompts exposed by the server."""
        return await self.request("prompts/list", _cursor_params(cursor))

    async def get_prompt(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Render a prompt by name."""
        return await self.request(
            "prompts/get",
            {"name": name, "arguments": arguments or {}},
        )

    async def close(self) -> None:
        """
        Close the client.

        Every request still waiting is failed with a cancellation error,
        the session id is forgotten and the transport is released.
        """
        if self._state.is_closed:
            return

        self._state.transition(ProtocolState.CLOSED)

        abandoned = self._correlator.abandon_all(MCPError.cancelled("Client closing"))
        if abandoned:
            logger.debug(f"Cancelled {abandoned} pending requests on close")

        self._session.clear()
        await self.transport.disconnect()

    async def _exchange(self, message: dict[str, Any]) -> Message | None:
        """Run one transport exchange and feed its result to the correlator."""
        if self._state.is_closed:
            raise SessionError("Client is closed")

        if not self.transport.is_connected():
            await self.transport.connect()

        result = await self.transport.send(message, self._build_headers())
        if self._state.is_closed:
            logger.debug(f"Discarding {result} received after close")
            return None

        self._session.observe(result.headers)
        return await self._correlator.on_transport_result(result)

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json, text/event-stream",
            "MCP-Protocol-Version": self.protocol_version,
        }
        self._session.apply(headers)
        return headers

    async def __aenter__(self) -> "MCPClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _cursor_params(cursor: str | None) -> dict[str, Any]:
    return {"cursor": cursor} if cursor else {}
