"""Protocol error types and error codes."""

from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Implementation codes (-32000 to -32099)
REQUEST_TIMEOUT = -32001
REQUEST_CANCELLED = -32002
UNMATCHED_RESPONSE = -32003

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    REQUEST_TIMEOUT: "Request timeout",
    REQUEST_CANCELLED: "Request cancelled",
    UNMATCHED_RESPONSE: "Unmatched response",
}


@dataclass
class MCPError(Exception):
    """
    MCP protocol error.

    Raised for error responses from the server and for locally
    detected protocol failures (timeouts, cancellation).
    """

    code: int
    message: str
    data: Any = None

    def __post_init__(self):
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-RPC error object."""
        error = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, error: dict[str, Any]) -> "MCPError":
        """Create from JSON-RPC error object."""
        return cls(
            code=error.get("code", INTERNAL_ERROR),
            message=error.get("message", "Unknown error"),
            data=error.get("data"),
        )

    @classmethod
    def internal_error(cls, details: str | None = None) -> "MCPError":
        """Create an internal error."""
        return cls(
            code=INTERNAL_ERROR,
            message=details or ERROR_MESSAGES[INTERNAL_ERROR],
        )

    @classmethod
    def timeout(cls, timeout_seconds: float) -> "MCPError":
        """Create a request timeout error."""
        return cls(
            code=REQUEST_TIMEOUT,
            message=f"Request timed out after {timeout_seconds}s",
            data={"timeout": timeout_seconds},
        )

    @classmethod
    def cancelled(cls, reason: str | None = None) -> "MCPError":
        """Create a request cancelled error."""
        return cls(
            code=REQUEST_CANCELLED,
            message=reason or ERROR_MESSAGES[REQUEST_CANCELLED],
        )

    def __str__(self) -> str:
        base = f"MCP Error {self.code}: {self.message}"
        if self.data:
            base += f" {self.data}"
        return base

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r}, data={self.data})"


class UnmatchedResponseError(MCPError):
    """A response arrived whose id matches no pending request."""

    def __init__(self, response_id: Any):
        super().__init__(
            code=UNMATCHED_RESPONSE,
            message=f"No pending request for id: {response_id}",
            data={"id": response_id},
        )
