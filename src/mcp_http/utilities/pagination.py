"""Pagination utility for MCP list operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Generic, TypeVar

from mcp_http.protocol.errors import MCPError, INVALID_PARAMS

if TYPE_CHECKING:
    from mcp_http.protocol.client import MCPClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    """
    Result of a paginated list operation.

    Contains items and optional cursor for next page.
    """

    items: list[T] = field(default_factory=list)
    """Items in this page."""

    next_cursor: str | None = None
    """Cursor for fetching next page (None if no more pages)."""

    @property
    def has_more(self) -> bool:
        """Check if more pages are available."""
        return self.next_cursor is not None


class PaginationError(Exception):
    """Error related to pagination operations."""

    pass


class InvalidCursorError(PaginationError):
    """The provided cursor is invalid or expired."""

    pass


class PaginatedListHelper:
    """
    Helper for cursor-based pagination of MCP list operations.

    Cursors are opaque strings that clients must not parse or modify.
    """

    def __init__(self, client: "MCPClient") -> None:
        self.client = client

    async def list_page(
        self,
        method: str,
        items_key: str,
        cursor: str | None = None,
    ) -> PaginatedResult[dict[str, Any]]:
        """
        Fetch a single page of results.

        Args:
            method: RPC method (e.g., "tools/list").
            items_key: Key in response containing items (e.g., "tools").
            cursor: Pagination cursor from previous request.

        Raises:
            InvalidCursorError: If the server rejected the cursor.
            PaginationError: If the request failed otherwise.
        """
        params: dict[str, Any] = {"cursor": cursor} if cursor else {}

        logger.debug(f"Fetching page: method={method}, cursor={cursor}")

        try:
            result = await self.client.request(method, params)
        except MCPError as e:
            if e.code == INVALID_PARAMS and cursor:
                raise InvalidCursorError(f"Invalid cursor: {cursor}") from e
            raise PaginationError(f"List request failed: {e}") from e

        result = result or {}
        items = result.get(items_key, [])
        next_cursor = result.get("nextCursor") or None

        logger.debug(
            f"Page result: {len(items)} items, "
            f"has_more={next_cursor is not None}"
        )

        return PaginatedResult(items=items, next_cursor=next_cursor)

    async def list_all(
        self,
        method: str,
        items_key: str,
        max_pages: int = 100,
    ) -> list[dict[str, Any]]:
        """
        Fetch all pages of results.

        Stops after max_pages pages and logs a warning if the server
        still reports more.
        """
        all_items: list[dict[str, Any]] = []
        cursor: str | None = None

        for page_num in range(max_pages):
            result = await self.list_page(method, items_key, cursor)
            all_items.extend(result.items)

            if not result.has_more:
                logger.debug(f"Fetched all items in {page_num + 1} pages")
                return all_items

            cursor = result.next_cursor

        logger.warning(
            f"Reached max_pages limit ({max_pages}) for {method}, "
            f"there may be more results"
        )
        return all_items

    async def iter_items(
        self,
        method: str,
        items_key: str,
        max_pages: int = 100,
    ) -> AsyncIterator[dict[str, Any]]:
        """Iterate through all items across at most max_pages pages."""
        cursor: str | None = None

        for _ in range(max_pages):
            page = await self.list_page(method, items_key, cursor)
            for item in page.items:
                yield item
            if not page.has_more:
                return
            cursor = page.next_cursor

        logger.warning(
            f"Reached max_pages limit ({max_pages}) for {method}, "
            f"there may be more results"
        )


async def list_all_tools(client: "MCPClient") -> list[dict[str, Any]]:
    """List all tools, handling pagination automatically."""
    return await PaginatedListHelper(client).list_all("tools/list", "tools")


async def list_all_resources(client: "MCPClient") -> list[dict[str, Any]]:
    """List all resources, handling pagination automatically."""
    return await PaginatedListHelper(client).list_all("resources/list", "resources")


async def list_all_prompts(client: "MCPClient") -> list[dict[str, Any]]:
    """List all prompts, handling pagination automatically."""
    return await PaginatedListHelper(client).list_all("prompts/list", "prompts")
