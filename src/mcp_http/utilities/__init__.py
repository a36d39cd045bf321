"""Protocol utilities built on top of MCPClient."""

from mcp_http.utilities.pagination import (
    PaginatedResult,
    PaginatedListHelper,
    PaginationError,
    InvalidCursorError,
    list_all_tools,
    list_all_resources,
    list_all_prompts,
)

__all__ = [
    "PaginatedResult",
    "PaginatedListHelper",
    "PaginationError",
    "InvalidCursorError",
    "list_all_tools",
    "list_all_resources",
    "list_all_prompts",
]
