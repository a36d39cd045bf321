"""JSON-RPC 2.0 message types for MCP protocol."""

from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


@dataclass
class JSONRPCRequest:
    """
    JSON-RPC 2.0 request message.

    Requests expect a response from the recipient. The id is assigned by
    the message correlator and is unique per client instance.
    """

    id: int | str
    method: str
    params: dict[str, Any] | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCRequest":
        """Create from JSON dict."""
        return cls(
            id=data["id"],
            method=data["method"],
            params=data.get("params"),
        )

    def __str__(self) -> str:
        return f"Request({self.method}, id={self.id})"


@dataclass
class JSONRPCError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCError":
        """Create from JSON dict."""
        return cls(
            code=data.get("code", -32603),
            message=data.get("message", "Unknown error"),
            data=data.get("data"),
        )


@dataclass
class JSONRPCResponse:
    """
    JSON-RPC 2.0 response message.

    Either result or error must be present, but not both.
    """

    id: int | str | None
    result: Any = None
    error: JSONRPCError | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    @property
    def is_error(self) -> bool:
        """Check if this is an error response."""
        return self.error is not None

    @property
    def is_success(self) -> bool:
        """Check if this is a success response."""
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }
        if self.error is not None:
            msg["error"] = self.error.to_dict()
        else:
            msg["result"] = self.result
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCResponse":
        """Create from JSON dict."""
        error = None
        if "error" in data:
            error = JSONRPCError.from_dict(data["error"])
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
        )

    @classmethod
    def success(cls, id: int | str | None, result: Any = None) -> "JSONRPCResponse":
        """Create a success response."""
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls,
        id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> "JSONRPCResponse":
        """Create an error response."""
        return cls(id=id, error=JSONRPCError(code=code, message=message, data=data))

    def __str__(self) -> str:
        if self.is_error:
            return f"Response(id={self.id}, error={self.error.code})"
        return f"Response(id={self.id}, success)"


@dataclass
class JSONRPCNotification:
    """
    JSON-RPC 2.0 notification message.

    Notifications do not expect a response (no id field).
    """

    method: str
    params: dict[str, Any] | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCNotification":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            params=data.get("params"),
        )

    def __str__(self) -> str:
        return f"Notification({self.method})"


Message = JSONRPCRequest | JSONRPCResponse | JSONRPCNotification


def parse_message(data: Any) -> Message:
    """
    Parse a decoded JSON value into the appropriate message type.

    Args:
        data: Decoded JSON-RPC message.

    Returns:
        The appropriate message type based on content.

    Raises:
        ValueError: If the message is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise ValueError("Invalid JSON-RPC version")

    has_id = "id" in data
    has_method = "method" in data
    has_result = "result" in data
    has_error = "error" in data

    if has_id and not _is_valid_id(data["id"]):
        raise ValueError(f"Id must be a string, number or null, got {type(data['id']).__name__}")

    if has_method:
        if not isinstance(data["method"], str):
            raise ValueError("Method must be a string")
        if has_id:
            return JSONRPCRequest.from_dict(data)
        return JSONRPCNotification.from_dict(data)

    if not has_id:
        raise ValueError("Cannot determine message type")

    if has_result == has_error:
        raise ValueError("Response must carry exactly one of result or error")

    if has_error and not isinstance(data["error"], dict):
        raise ValueError("Error must be an object")

    return JSONRPCResponse.from_dict(data)


def _is_valid_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def is_request(data: dict[str, Any]) -> bool:
    """Check if message is a request (has id and method)."""
    return "id" in data and "method" in data


def is_notification(data: dict[str, Any]) -> bool:
    """Check if message is a notification (has method, no id)."""
    return "method" in data and "id" not in data


def is_response(data: dict[str, Any]) -> bool:
    """Check if message is a response (has id, no method)."""
    return "id" in data and "method" not in data
