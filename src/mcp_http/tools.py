"""Per-tool callables built on MCPClient.call_tool."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mcp_http.utilities.pagination import list_all_tools

if TYPE_CHECKING:
    from mcp_http.protocol.client import MCPClient

logger = logging.getLogger(__name__)


@dataclass
class BoundTool:
    """A server tool bound to a client, callable like a coroutine function."""

    client: "MCPClient"
    name: str
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=dict)

    async def __call__(self, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.client.call_tool(self.name, arguments)

    @classmethod
    def from_dict(cls, client: "MCPClient", data: dict[str, Any]) -> "BoundTool":
        """Build from one entry of a tools/list result."""
        return cls(
            client=client,
            name=data["name"],
            description=data.get("description", ""),
            input_schema=data.get("inputSchema", {}),
        )

    def to_function_schema(self) -> dict[str, Any]:
        """
        Render in OpenAI/Anthropic function calling format.

        MCP format:
            {"name": "...", "description": "...", "inputSchema": {...}}

        Function format:
            {"type": "function", "function": {"name": "...", "description": "...", "parameters": {...}}}
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema or {"type": "object", "properties": {}},
            },
        }

    def __str__(self) -> str:
        return f"BoundTool({self.name})"


def bind_tool(client: "MCPClient", name: str) -> BoundTool:
    """Bind a tool by name without listing the server's tools first."""
    return BoundTool(client=client, name=name)


async def discover_tools(client: "MCPClient") -> dict[str, BoundTool]:
    """
    List every tool the server exposes and bind each one.

    Returns:
        Mapping of tool name to BoundTool.
    """
    tools: dict[str, BoundTool] = {}
    for entry in await list_all_tools(client):
        if not isinstance(entry, dict) or not entry.get("name"):
            logger.warning(f"Skipping tool entry without a name: {entry!r}")
            continue
        tools[entry["name"]] = BoundTool.from_dict(client, entry)

    logger.debug(f"Discovered {len(tools)} tools")
    return tools
