"""Concurrent creation and initialization of several MCP clients."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from mcp_http.config import MCPServerConfig
from mcp_http.protocol.client import MCPClient
from mcp_http.protocol.handshake import ClientInfo

logger = logging.getLogger(__name__)


class FanOutError(Exception):
    """One or more clients failed their handshake."""

    def __init__(self, errors: dict[str, BaseException]):
        self.errors = errors
        details = ", ".join(f"{name}: {error}" for name, error in errors.items())
        super().__init__(f"Failed to initialize {len(errors)} MCP client(s): {details}")


def _build_client(endpoint: str | MCPServerConfig, **client_options: Any) -> MCPClient:
    if isinstance(endpoint, MCPServerConfig):
        return MCPClient.from_url(endpoint.url, headers=endpoint.headers, **client_options)
    return MCPClient.from_url(endpoint, **client_options)


async def initialize_clients(
    clients: Mapping[str, MCPClient],
    client_info: ClientInfo | Mapping[str, Any] | None = None,
) -> dict[str, MCPClient]:
    """
    Run the handshake for every client concurrently.

    Waits for all handshakes to finish. If any failed, every client is
    closed, including the ones that succeeded, and FanOutError is raised.

    Returns:
        The same name-to-client mapping.
    """
    names = list(clients)
    outcomes = await asyncio.gather(
        *(clients[name].initialize(client_info) for name in names),
        return_exceptions=True,
    )

    errors: dict[str, BaseException] = {}
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(f"Handshake with {name} failed: {outcome}")
            errors[name] = outcome

    if errors:
        await asyncio.gather(
            *(client.close() for client in clients.values()),
            return_exceptions=True,
        )
        raise FanOutError(errors)

    logger.info(f"Initialized {len(names)} MCP clients: {', '.join(names)}")
    return dict(clients)


async def create_clients(
    endpoints: Mapping[str, str | MCPServerConfig],
    client_info: ClientInfo | Mapping[str, Any] | None = None,
    **client_options: Any,
) -> dict[str, MCPClient]:
    """
    Create one client per named endpoint and initialize them all.

    Args:
        endpoints: Name to URL, or name to MCPServerConfig.
        client_info: Sent in every initialize request.
        **client_options: Passed to MCPClient (protocol_version,
            request_timeout, ...).

    Returns:
        Name to initialized client, with exactly the input keys.

    Raises:
        FanOutError: If any handshake failed; no client is left open.
    """
    clients = {
        name: _build_client(endpoint, **client_options)
        for name, endpoint in endpoints.items()
    }
    return await initialize_clients(clients, client_info)


async def create_clients_from_config(
    configs: Mapping[str, MCPServerConfig],
    client_info: ClientInfo | Mapping[str, Any] | None = None,
    **client_options: Any,
) -> dict[str, MCPClient]:
    """Fan out over the result of load_mcp_config()."""
    return await create_clients(dict(configs), client_info, **client_options)
