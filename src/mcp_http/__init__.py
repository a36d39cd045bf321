"""
MCP (Model Context Protocol) client over HTTP.

JSON-RPC 2.0 requests and notifications are sent as unary HTTP POSTs.
Responses are matched to requests by id, the server session id is
carried across calls, and the initialize handshake is tracked.

Submodules:
- transport: HTTP POST transport layer
- protocol: JSON-RPC messages, correlation, session, handshake, client
- utilities: Pagination helpers for list operations
- tools: Per-tool callables on top of call_tool
- integration: Concurrent creation of several clients
- config: Server configuration files
"""

# Transport layer
from mcp_http.transport import (
    HTTPTransport,
    TransportConfig,
    TransportResult,
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    HTTPStatusError,
    MalformedResponseError,
)

# Protocol layer
from mcp_http.protocol import (
    MCPClient,
    MCPError,
    UnmatchedResponseError,
    ClientInfo,
    DEFAULT_PROTOCOL_VERSION,
    ProtocolState,
    InvalidStateTransition,
    SessionConflictPolicy,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCNotification,
)

# Configuration
from mcp_http.config import MCPServerConfig, load_mcp_config

# Helpers
from mcp_http.tools import BoundTool, bind_tool, discover_tools
from mcp_http.utilities import (
    PaginatedResult,
    PaginatedListHelper,
    list_all_tools,
    list_all_resources,
    list_all_prompts,
)
from mcp_http.integration import FanOutError, create_clients

__version__ = "0.1.0"

__all__ = [
    # Transport
    "HTTPTransport",
    "TransportConfig",
    "TransportResult",
    "Transport",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "HTTPStatusError",
    "MalformedResponseError",
    # Protocol
    "MCPClient",
    "MCPError",
    "UnmatchedResponseError",
    "ClientInfo",
    "DEFAULT_PROTOCOL_VERSION",
    "ProtocolState",
    "InvalidStateTransition",
    "SessionConflictPolicy",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCNotification",
    # Config
    "MCPServerConfig",
    "load_mcp_config",
    # Helpers
    "BoundTool",
    "bind_tool",
    "discover_tools",
    "PaginatedResult",
    "PaginatedListHelper",
    "list_all_tools",
    "list_all_resources",
    "list_all_prompts",
    "FanOutError",
    "create_clients",
]
