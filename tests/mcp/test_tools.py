"""Tests for pagination helpers and bound tools."""

import pytest

from conftest import ScriptedTransport, accepted, reply, reply_error
from mcp_http.protocol.client import MCPClient
from mcp_http.tools import BoundTool, bind_tool, discover_tools
from mcp_http.utilities.pagination import (
    InvalidCursorError,
    PaginatedListHelper,
    PaginationError,
    list_all_prompts,
    list_all_resources,
    list_all_tools,
)

PAGES = {
    None: {
        "tools": [{"name": "search", "description": "Search things", "inputSchema": {"type": "object"}}],
        "nextCursor": "p2",
    },
    "p2": {"tools": [{"name": "fetch"}, {"description": "no name"}]},
}


def paged_responder(message):
    if "id" not in message:
        return accepted()
    method = message["method"]
    cursor = message["params"].get("cursor")
    if method == "tools/list":
        if cursor not in PAGES:
            return reply_error(message["id"], -32602, "bad cursor")
        return reply(message["id"], PAGES[cursor])
    if method == "resources/list":
        return reply(message["id"], {"resources": [{"uri": "file:///a"}]})
    if method == "prompts/list":
        return reply(message["id"], {"prompts": [{"name": "p"}]})
    if method == "tools/call":
        return reply(message["id"], {"content": [{"type": "text", "text": message["params"]["name"]}]})
    return reply_error(message["id"], -32601, "not found")


@pytest.fixture
def paged_client():
    transport = ScriptedTransport(paged_responder)
    return MCPClient(transport), transport


class TestPagination:
    @pytest.mark.asyncio
    async def test_list_page(self, paged_client):
        client, transport = paged_client
        page = await PaginatedListHelper(client).list_page("tools/list", "tools")

        assert [t["name"] for t in page.items] == ["search"]
        assert page.has_more
        assert page.next_cursor == "p2"

    @pytest.mark.asyncio
    async def test_list_all_follows_cursor(self, paged_client):
        client, transport = paged_client
        tools = await list_all_tools(client)

        assert len(tools) == 3
        assert transport.sent[1]["params"] == {"cursor": "p2"}

    @pytest.mark.asyncio
    async def test_max_pages(self, paged_client):
        client, transport = paged_client
        items = await PaginatedListHelper(client).list_all("tools/list", "tools", max_pages=1)
        assert len(items) == 1
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_invalid_cursor(self, paged_client):
        client, _ = paged_client
        with pytest.raises(InvalidCursorError):
            await PaginatedListHelper(client).list_page("tools/list", "tools", "stale")

    @pytest.mark.asyncio
    async def test_request_failure(self, paged_client):
        client, _ = paged_client
        with pytest.raises(PaginationError, match="List request failed"):
            await PaginatedListHelper(client).list_page("unknown/list", "items")

    @pytest.mark.asyncio
    async def test_iter_items(self, paged_client):
        client, _ = paged_client
        names = [item.get("name") async for item in PaginatedListHelper(client).iter_items("tools/list", "tools")]
        assert names == ["search", "fetch", None]

    @pytest.mark.asyncio
    async def test_iter_items_stops_at_max_pages(self):
        def endless(message):
            return reply(message["id"], {"tools": [{"name": "t"}], "nextCursor": "again"})

        transport = ScriptedTransport(endless)
        helper = PaginatedListHelper(MCPClient(transport))

        items = [item async for item in helper.iter_items("tools/list", "tools", max_pages=3)]

        assert len(items) == 3
        assert len(transport.sent) == 3

    @pytest.mark.asyncio
    async def test_resources_and_prompts(self, paged_client):
        client, _ = paged_client
        assert await list_all_resources(client) == [{"uri": "file:///a"}]
        assert await list_all_prompts(client) == [{"name": "p"}]


class TestBoundTools:
    @pytest.mark.asyncio
    async def test_discover_tools(self, paged_client):
        client, _ = paged_client
        tools = await discover_tools(client)

        assert set(tools) == {"search", "fetch"}
        assert tools["search"].description == "Search things"
        assert tools["search"].input_schema == {"type": "object"}

    @pytest.mark.asyncio
    async def test_bound_tool_calls_call_tool(self, paged_client):
        client, transport = paged_client
        tool = bind_tool(client, "search")

        result = await tool({"query": "mcp"})

        assert transport.sent[-1]["method"] == "tools/call"
        assert transport.sent[-1]["params"] == {"name": "search", "arguments": {"query": "mcp"}}
        assert result["content"][0]["text"] == "search"

    def test_function_schema(self, paged_client):
        client, _ = paged_client
        tool = BoundTool(client=client, name="fetch", description="Fetch a URL")

        assert tool.to_function_schema() == {
            "type": "function",
            "function": {
                "name": "fetch",
                "description": "Fetch a URL",
                "parameters": {"type": "object", "properties": {}},
            },
        }
