"""Pytest configuration and fixtures."""

import inspect
from typing import Any, Awaitable, Callable

import pytest

from mcp_http.lib import oj
from mcp_http.protocol.client import MCPClient
from mcp_http.transport.base import Transport
from mcp_http.transport.types import TransportConfig, TransportResult

# Async tests are marked with @pytest.mark.asyncio
pytest_plugins = ["pytest_asyncio"]

Responder = Callable[[dict[str, Any]], TransportResult | Awaitable[TransportResult]]


def reply(request_id: Any, result: Any = None, headers: dict[str, str] | None = None) -> TransportResult:
    """200 exchange carrying a success response."""
    body = {"jsonrpc": "2.0", "id": request_id, "result": result if result is not None else {}}
    return TransportResult(200, headers or {}, oj.dumps(body))


def reply_error(request_id: Any, code: int, message: str) -> TransportResult:
    """200 exchange carrying an error response."""
    body = {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}
    return TransportResult(200, {}, oj.dumps(body))


def accepted(headers: dict[str, str] | None = None) -> TransportResult:
    """202 exchange with no body."""
    return TransportResult(202, headers or {}, b"")


def raw(status: int, body: bytes | str, headers: dict[str, str] | None = None) -> TransportResult:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return TransportResult(status, headers or {}, body)


INIT_RESULT = {
    "protocolVersion": "2025-03-26",
    "capabilities": {"tools": {}},
    "serverInfo": {"name": "test-server", "version": "2.0.0"},
}


def default_responder(message: dict[str, Any]) -> TransportResult:
    """Requests get a result echoing their method; notifications get 202."""
    if "id" not in message:
        return accepted()
    if message["method"] == "initialize":
        return reply(message["id"], INIT_RESULT)
    return reply(message["id"], {"method": message["method"], "params": message.get("params")})


class ScriptedTransport(Transport):
    """In-memory transport recording every exchange and answering via a responder."""

    def __init__(self, responder: Responder | None = None):
        super().__init__(TransportConfig(url="http://localhost:8080/mcp"))
        self.responder = responder or default_responder
        self.sent: list[dict[str, Any]] = []
        self.sent_headers: list[dict[str, str]] = []
        self.connected = False
        self.disconnect_calls = 0

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False
        self.disconnect_calls += 1

    def is_connected(self) -> bool:
        return self.connected

    async def send(self, message, headers) -> TransportResult:
        self.sent.append(message)
        self.sent_headers.append(dict(headers))
        outcome = self.responder(message)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    @property
    def methods(self) -> list[str]:
        return [m["method"] for m in self.sent]


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def client(transport):
    return MCPClient(transport)
