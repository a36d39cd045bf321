"""
MCP Transport Layer.

Unary HTTP POST transport: one message out, one status/headers/body back.
"""

from mcp_http.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
    TransportResult,
)
from mcp_http.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    HTTPStatusError,
    MalformedResponseError,
)
from mcp_http.transport.http import HTTPTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportEvent",
    "TransportEventType",
    "TransportResult",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "HTTPStatusError",
    "MalformedResponseError",
    "HTTPTransport",
]
