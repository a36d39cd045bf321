"""Session identifier tracking for Mcp-Session-Id affinity."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from enum import Enum

from mcp_http.transport.base import SessionError
from mcp_http.transport.types import find_header

logger = logging.getLogger(__name__)

MCP_SESSION_HEADER = "Mcp-Session-Id"


class SessionConflictPolicy(Enum):
    """What to do when a response carries a different session id."""

    KEEP_FIRST = "keep_first"
    OVERWRITE = "overwrite"
    REJECT = "reject"


class SessionTracker:
    """
    Holds at most one server-assigned session id per client.

    The id is captured from response headers and attached to every
    subsequent outbound exchange.
    """

    def __init__(self, policy: SessionConflictPolicy = SessionConflictPolicy.KEEP_FIRST):
        self.policy = policy
        self._session_id: str | None = None

    @property
    def session_id(self) -> str | None:
        """Current session id, or None before the server assigned one."""
        return self._session_id

    def observe(self, headers: Mapping[str, str]) -> None:
        """
        Capture the session id from inbound response headers.

        Args:
            headers: Response headers; the lookup is case-insensitive.

        Raises:
            SessionError: If a conflicting id arrives under REJECT.
        """
        incoming = find_header(headers, MCP_SESSION_HEADER)
        if not incoming:
            return

        if self._session_id is None:
            self._session_id = incoming
            logger.info(f"Session established: {incoming}")
            return

        if incoming == self._session_id:
            return

        if self.policy is SessionConflictPolicy.OVERWRITE:
            logger.info(f"Session changed: {self._session_id} -> {incoming}")
            self._session_id = incoming
        elif self.policy is SessionConflictPolicy.REJECT:
            raise SessionError(
                f"Server sent session {incoming!r}, expected {self._session_id!r}"
            )
        else:
            logger.warning(
                f"Ignoring conflicting session {incoming!r}, keeping {self._session_id!r}"
            )

    def apply(self, outbound_headers: MutableMapping[str, str]) -> None:
        """Add the session header to an outbound header set, if one is held."""
        if self._session_id:
            outbound_headers[MCP_SESSION_HEADER] = self._session_id

    def clear(self) -> None:
        """Forget the held session id."""
        self._session_id = None

