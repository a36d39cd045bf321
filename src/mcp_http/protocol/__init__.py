"""
MCP Protocol Core.

Implements JSON-RPC 2.0 message framing, request/response correlation,
session tracking, notification dispatch, and the handshake state machine.
"""

from mcp_http.protocol.messages import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCNotification,
    JSONRPCError,
    parse_message,
)
from mcp_http.protocol.errors import (
    MCPError,
    UnmatchedResponseError,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    REQUEST_TIMEOUT,
    REQUEST_CANCELLED,
)
from mcp_http.protocol.state import (
    ProtocolState,
    ProtocolStateMachine,
    InvalidStateTransition,
)
from mcp_http.protocol.session import SessionConflictPolicy, SessionTracker
from mcp_http.protocol.dispatcher import NotificationDispatcher
from mcp_http.protocol.correlator import MessageCorrelator
from mcp_http.protocol.handshake import ClientInfo, DEFAULT_PROTOCOL_VERSION
from mcp_http.protocol.client import MCPClient

__all__ = [
    # Messages
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCNotification",
    "JSONRPCError",
    "parse_message",
    # Errors
    "MCPError",
    "UnmatchedResponseError",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "REQUEST_TIMEOUT",
    "REQUEST_CANCELLED",
    # State
    "ProtocolState",
    "ProtocolStateMachine",
    "InvalidStateTransition",
    # Session and routing
    "SessionConflictPolicy",
    "SessionTracker",
    "NotificationDispatcher",
    "MessageCorrelator",
    # Client
    "ClientInfo",
    "DEFAULT_PROTOCOL_VERSION",
    "MCPClient",
]
