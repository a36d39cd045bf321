"""Initialize handshake payloads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_PROTOCOL_VERSION = "2025-03-26"

INITIALIZE_METHOD = "initialize"
INITIALIZED_NOTIFICATION = "notifications/initialized"


@dataclass
class ClientInfo:
    """Information about this client sent during initialization."""

    name: str = "mcp-http-client"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, str]:
        """Convert to wire format."""
        return {"name": self.name, "version": self.version}

    @classmethod
    def coerce(cls, value: "ClientInfo | Mapping[str, Any] | None") -> "ClientInfo":
        """Accept a ClientInfo, a partial mapping, or None."""
        if value is None:
            return cls()
        if isinstance(value, ClientInfo):
            return value
        defaults = cls()
        return cls(
            name=value.get("name") or defaults.name,
            version=value.get("version") or defaults.version,
        )


def initialize_params(
    protocol_version: str,
    client_info: ClientInfo,
    capabilities: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the params object of the initialize request."""
    return {
        "protocolVersion": protocol_version,
        "capabilities": capabilities if capabilities is not None else {},
        "clientInfo": client_info.to_dict(),
    }
