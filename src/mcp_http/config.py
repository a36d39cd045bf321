"""MCP server configuration loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mcp_http.lib import oj

logger = logging.getLogger(__name__)

# Config file locations
MCP_CONFIG_FILENAME = "mcp.json"
GLOBAL_MCP_CONFIG = Path.home() / ".mcp_http" / MCP_CONFIG_FILENAME
LOCAL_MCP_CONFIG_DIR = ".mcp_http"


@dataclass
class MCPServerConfig:
    """Configuration for a single MCP server."""

    name: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "MCPServerConfig":
        """Create from config dict."""
        return cls(
            name=name,
            url=data.get("url", ""),
            headers=data.get("headers", {}),
        )


def _read_servers(path: Path) -> dict[str, MCPServerConfig]:
    configs: dict[str, MCPServerConfig] = {}
    try:
        data = oj.loads(path.read_bytes())
    except (OSError, oj.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable MCP config {path}: {e}")
        return configs

    servers = data.get("mcpServers", {}) if isinstance(data, dict) else {}
    for name, server_data in servers.items():
        if isinstance(server_data, dict) and server_data.get("url"):
            configs[name] = MCPServerConfig.from_dict(name, server_data)
        else:
            logger.debug(f"Skipping MCP server {name!r} in {path}: no url")
    return configs


def load_mcp_config(
    working_dir: Path | None = None,
    global_config: Path | None = None,
) -> dict[str, MCPServerConfig]:
    """Load MCP server configs from global and local config files.

    Global config (~/.mcp_http/mcp.json) is loaded first.
    Local config ({working_dir}/.mcp_http/mcp.json) overrides global.

    Returns:
        Dict mapping server name to config.
    """
    configs: dict[str, MCPServerConfig] = {}

    global_path = global_config or GLOBAL_MCP_CONFIG
    if global_path.exists():
        configs.update(_read_servers(global_path))

    if working_dir:
        local_config = working_dir / LOCAL_MCP_CONFIG_DIR / MCP_CONFIG_FILENAME
        if local_config.exists():
            configs.update(_read_servers(local_config))

    return configs
