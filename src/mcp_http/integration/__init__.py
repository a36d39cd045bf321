"""Multi-server helpers."""

from mcp_http.integration.fanout import (
    FanOutError,
    create_clients,
    create_clients_from_config,
    initialize_clients,
)

__all__ = [
    "FanOutError",
    "create_clients",
    "create_clients_from_config",
    "initialize_clients",
]
