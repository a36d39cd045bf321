"""Routing of server-initiated notifications to registered observers."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable

from mcp_http.protocol.messages import JSONRPCNotification

logger = logging.getLogger(__name__)

MessageHandler = Callable[[JSONRPCNotification], Awaitable[None] | None]


class NotificationDispatcher:
    """
    Fans inbound notifications out to every registered handler.

    Handlers run in registration order and receive the full envelope.
    Both plain callables and coroutine functions are accepted.
    """

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []

    def register(self, handler: MessageHandler) -> None:
        """Append a handler. Registering the same callable twice calls it twice."""
        self._handlers.append(handler)

    @property
    def handlers(self) -> list[MessageHandler]:
        return list(self._handlers)

    async def dispatch(self, notification: JSONRPCNotification) -> None:
        """
        Deliver a notification to all handlers.

        A failing handler is logged and does not prevent delivery to the
        handlers registered after it.
        """
        logger.debug(f"Dispatching {notification} to {len(self._handlers)} handlers")

        for handler in self._handlers:
            try:
                outcome: Any = handler(notification)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception(f"Notification handler error for {notification.method}")

    def __len__(self) -> int:
        return len(self._handlers)
