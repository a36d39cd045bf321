"""Request/response correlation for JSON-RPC over unary HTTP exchanges."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp_http.lib import oj
from mcp_http.protocol.dispatcher import NotificationDispatcher
from mcp_http.protocol.errors import MCPError, UnmatchedResponseError
from mcp_http.protocol.messages import (
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    Message,
    parse_message,
)
from mcp_http.transport.base import HTTPStatusError, MalformedResponseError
from mcp_http.transport.types import TransportResult

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_ACCEPTED = 202


class MessageCorrelator:
    """
    Matches responses to the requests that caused them.

    Owns the id counter and the table of pending requests. Ids start at
    1 and are never reused within one correlator. Responses may arrive
    in any order; each one settles only the entry with its own id.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        strict_response_ids: bool = False,
    ):
        """
        Args:
            dispatcher: Receives notifications found in response bodies.
            strict_response_ids: Raise UnmatchedResponseError instead of
                dropping responses whose id matches no pending request.
        """
        self._dispatcher = dispatcher
        self.strict_response_ids = strict_response_ids
        self._last_id = 0
        self._pending: dict[int | str, asyncio.Future[Any]] = {}

    @property
    def last_id(self) -> int:
        """Most recently allocated id (0 before the first request)."""
        return self._last_id

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, request_id: int | str) -> bool:
        return request_id in self._pending

    def next_id(self) -> int:
        """Allocate the next request id."""
        self._last_id += 1
        return self._last_id

    def register(self, request_id: int | str) -> asyncio.Future[Any]:
        """Record a pending entry for a request about to be sent."""
        if request_id in self._pending:
            raise MCPError.internal_error(f"Request id {request_id} already pending")
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        return future

    def create_request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[JSONRPCRequest, asyncio.Future[Any]]:
        """Build a request with a fresh id and register its pending entry."""
        request = JSONRPCRequest(id=self.next_id(), method=method, params=params)
        return request, self.register(request.id)

    async def wait(
        self,
        request_id: int | str,
        future: asyncio.Future[Any],
        timeout: float | None = None,
    ) -> Any:
        """
        Wait for a pending entry to settle.

        Args:
            request_id: Id the entry was registered under.
            future: The entry returned by register().
            timeout: Deadline in seconds, or None to wait indefinitely.

        Returns:
            The response result.

        Raises:
            MCPError: Error response, timeout, or cancellation.
            TransportError: The exchange carrying the request failed.
        """
        try:
            return await asyncio.wait_for(future, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Request id={request_id} timed out after {timeout}s")
            raise MCPError.timeout(timeout)
        finally:
            self._pending.pop(request_id, None)

    def resolve_response(self, response: JSONRPCResponse) -> bool:
        """
        Settle the pending entry matching a response.

        Returns:
            True if an entry was settled, False if the response was dropped.

        Raises:
            UnmatchedResponseError: No entry matches and strict mode is on.
        """
        key = _normalize_id(response.id)
        future = self._pending.pop(key, None) if key is not None else None

        if future is None:
            if self.strict_response_ids:
                raise UnmatchedResponseError(response.id)
            logger.warning(f"No pending request for id: {response.id}, dropping response")
            return False

        if future.done():
            return False

        if response.is_error:
            future.set_exception(MCPError.from_dict(response.error.to_dict()))
        else:
            future.set_result(response.result)
        logger.debug(f"Resolved {response}")
        return True

    def reject(self, request_id: int | str, error: BaseException) -> bool:
        """Fail the pending entry for a sent request id."""
        future = self._pending.pop(request_id, None)
        if future is None or future.done():
            return False
        future.set_exception(error)
        return True

    def discard(self, request_id: int | str) -> None:
        """Drop a pending entry without delivering anything to it."""
        future = self._pending.pop(request_id, None)
        if future is not None and not future.done():
            future.cancel()

    def abandon_all(self, error: BaseException) -> int:
        """
        Fail every pending entry and empty the table.

        Returns:
            Number of entries that were still unsettled.
        """
        count = 0
        for future in self._pending.values():
            if not future.done():
                future.set_exception(error)
                count += 1
        self._pending.clear()
        return count

    async def on_transport_result(self, result: TransportResult) -> Message | None:
        """
        Interpret one completed exchange.

        202 completes with nothing. 200 must carry exactly one envelope:
        responses settle their pending entry, notifications go to the
        dispatcher. Any other status is an error.

        Returns:
            The parsed envelope, or None for 202.

        Raises:
            HTTPStatusError: Status other than 200 or 202.
            MalformedResponseError: Body is not a JSON-RPC envelope.
            MCPError: Error response carrying a null id.
        """
        if result.status_code == STATUS_ACCEPTED:
            return None

        if result.status_code != STATUS_OK:
            raise HTTPStatusError(result.status_code, result.text)

        try:
            data = oj.loads(result.body)
        except oj.JSONDecodeError as e:
            raise MalformedResponseError(str(e), body=result.body, cause=e)

        try:
            message = parse_message(data)
        except ValueError as e:
            raise MalformedResponseError(str(e), body=result.body, cause=e)

        if isinstance(message, JSONRPCResponse):
            if message.id is None and message.is_error:
                # Server could not attribute the error; it belongs to this exchange
                raise MCPError.from_dict(message.error.to_dict())
            self.resolve_response(message)
        elif isinstance(message, JSONRPCNotification):
            await self._dispatcher.dispatch(message)
        else:
            logger.warning(f"Ignoring server-initiated {message} on unary response")

        return message


def _normalize_id(value: Any) -> int | str | None:
    """Map a wire id onto the key it was registered under."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return value
