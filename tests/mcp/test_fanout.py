"""Tests for concurrent multi-client initialization."""

import asyncio

import pytest

from conftest import ScriptedTransport, accepted, default_responder, reply_error
from mcp_http.config import MCPServerConfig
from mcp_http.integration import fanout
from mcp_http.integration.fanout import FanOutError, create_clients, initialize_clients
from mcp_http.protocol.client import MCPClient
from mcp_http.protocol.errors import MCPError
from mcp_http.protocol.state import ProtocolState


def failing_responder(message):
    if "id" not in message:
        return accepted()
    return reply_error(message["id"], -32603, "server down")


@pytest.fixture
def built(monkeypatch):
    """Route create_clients through scripted transports keyed by URL."""
    clients: dict[str, MCPClient] = {}
    calls: list[tuple[object, dict]] = []

    def build(endpoint, **options):
        calls.append((endpoint, options))
        url = endpoint.url if isinstance(endpoint, MCPServerConfig) else endpoint
        responder = failing_responder if "fail" in url else default_responder
        client = MCPClient(ScriptedTransport(responder), **options)
        clients[url] = client
        return client

    monkeypatch.setattr(fanout, "_build_client", build)
    return clients, calls


class TestCreateClients:
    @pytest.mark.asyncio
    async def test_all_succeed(self, built):
        clients, _ = built

        result = await create_clients(
            {"a": "http://localhost/a", "b": "http://localhost/b"},
            {"name": "x"},
        )

        assert set(result) == {"a", "b"}
        for client in result.values():
            assert client.state == ProtocolState.READY
            assert client.transport.methods == ["initialize", "notifications/initialized"]
            assert client.transport.sent[0]["params"]["clientInfo"]["name"] == "x"

    @pytest.mark.asyncio
    async def test_one_failure_fails_all_and_closes(self, built):
        clients, _ = built

        with pytest.raises(FanOutError) as exc_info:
            await create_clients({"a": "http://localhost/a", "b": "http://localhost/fail"})

        assert set(exc_info.value.errors) == {"b"}
        assert isinstance(exc_info.value.errors["b"], MCPError)
        assert "server down" in str(exc_info.value)
        for client in clients.values():
            assert client.state == ProtocolState.CLOSED

    @pytest.mark.asyncio
    async def test_client_options_forwarded(self, built):
        _, calls = built

        result = await create_clients(
            {"a": MCPServerConfig(name="a", url="http://localhost/a", headers={"X": "1"})},
            protocol_version="2024-11-05",
        )

        endpoint, options = calls[0]
        assert isinstance(endpoint, MCPServerConfig)
        assert options == {"protocol_version": "2024-11-05"}
        assert result["a"].transport.sent[0]["params"]["protocolVersion"] == "2024-11-05"

    @pytest.mark.asyncio
    async def test_empty_mapping(self, built):
        assert await create_clients({}) == {}


class TestInitializeClients:
    @pytest.mark.asyncio
    async def test_handshakes_run_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        def make(name):
            async def responder(message):
                if "id" not in message:
                    return accepted()
                started.append(name)
                await release.wait()
                return default_responder(message)

            return MCPClient(ScriptedTransport(responder))

        clients = {"a": make("a"), "b": make("b")}
        task = asyncio.create_task(initialize_clients(clients))

        while len(started) < 2:
            await asyncio.sleep(0)
        release.set()

        result = await task
        assert sorted(started) == ["a", "b"]
        assert result == clients

    @pytest.mark.asyncio
    async def test_waits_for_slow_handshakes_before_failing(self):
        release = asyncio.Event()

        async def slow(message):
            if "id" not in message:
                return accepted()
            await release.wait()
            return default_responder(message)

        fast_fail = MCPClient(ScriptedTransport(failing_responder))
        slow_ok = MCPClient(ScriptedTransport(slow))
        task = asyncio.create_task(initialize_clients({"bad": fast_fail, "slow": slow_ok}))

        for _ in range(10):
            await asyncio.sleep(0)
        assert not task.done()

        release.set()
        with pytest.raises(FanOutError):
            await task
        assert slow_ok.state == ProtocolState.CLOSED
