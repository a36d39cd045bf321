"""Tests for JSON-RPC message types."""

import pytest

from mcp_http.protocol.errors import MCPError, INTERNAL_ERROR
from mcp_http.protocol.messages import (
    JSONRPCError,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    is_notification,
    is_request,
    is_response,
    parse_message,
)


class TestSerialization:
    def test_request_to_dict(self):
        request = JSONRPCRequest(id=3, method="tools/list", params={})
        assert request.to_dict() == {
            "jsonrpc": "2.0",
            "id": 3,
            "method": "tools/list",
            "params": {},
        }

    def test_request_without_params(self):
        assert "params" not in JSONRPCRequest(id=1, method="ping").to_dict()

    def test_notification_has_no_id(self):
        msg = JSONRPCNotification(method="notifications/initialized").to_dict()
        assert msg == {"jsonrpc": "2.0", "method": "notifications/initialized"}

    def test_error_response_to_dict(self):
        response = JSONRPCResponse.error_response(id=1, code=-32601, message="not found")
        assert response.to_dict() == {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32601, "message": "not found"},
        }
        assert str(response) == "Response(id=1, error=-32601)"


class TestParseMessage:
    def test_parse_request(self):
        message = parse_message({"jsonrpc": "2.0", "id": 1, "method": "ping"})
        assert isinstance(message, JSONRPCRequest)

    def test_parse_notification(self):
        message = parse_message({"jsonrpc": "2.0", "method": "notifications/message"})
        assert isinstance(message, JSONRPCNotification)

    def test_parse_success_response(self):
        message = parse_message({"jsonrpc": "2.0", "id": 1, "result": {"ok": True}})
        assert isinstance(message, JSONRPCResponse)
        assert message.is_success
        assert message.result == {"ok": True}

    def test_parse_null_result(self):
        message = parse_message({"jsonrpc": "2.0", "id": 1, "result": None})
        assert isinstance(message, JSONRPCResponse)
        assert message.result is None

    def test_parse_error_response(self):
        message = parse_message(
            {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "nope"}}
        )
        assert message.is_error
        assert message.error == JSONRPCError(code=-32601, message="nope")

    @pytest.mark.parametrize(
        "data",
        [
            [],
            "text",
            {"id": 1, "result": {}},
            {"jsonrpc": "1.0", "id": 1, "result": {}},
            {"jsonrpc": "2.0"},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "result": {}, "error": {"code": 1, "message": "x"}},
            {"jsonrpc": "2.0", "id": 1, "error": "broken"},
            {"jsonrpc": "2.0", "method": 5},
            {"jsonrpc": "2.0", "id": [1], "result": 1},
            {"jsonrpc": "2.0", "id": {"n": 1}, "result": 1},
            {"jsonrpc": "2.0", "id": True, "result": 1},
            {"jsonrpc": "2.0", "id": [1], "method": "ping"},
        ],
    )
    def test_rejects_malformed(self, data):
        with pytest.raises(ValueError):
            parse_message(data)

    def test_predicates(self):
        assert is_request({"id": 1, "method": "x"})
        assert is_notification({"method": "x"})
        assert is_response({"id": 1, "result": {}})
        assert not is_response({"id": 1, "method": "x"})


class TestMCPError:
    def test_from_dict_defaults(self):
        error = MCPError.from_dict({})
        assert error.code == INTERNAL_ERROR
        assert error.message == "Unknown error"

    def test_round_trip_fields(self):
        error = MCPError(code=-32602, message="bad", data={"field": "x"})
        assert error.to_dict() == {"code": -32602, "message": "bad", "data": {"field": "x"}}

    def test_str(self):
        assert str(MCPError(code=-32601, message="not found")) == "MCP Error -32601: not found"
