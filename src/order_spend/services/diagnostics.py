"""Bounded per-session diagnostic logs."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from order_spend.services.session_store import SessionStore

DEFAULT_LOG_LIMIT = 50

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticLog:
    """Append-only log that evicts its oldest entry once full."""

    limit: int = DEFAULT_LOG_LIMIT
    _entries: deque[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._entries = deque(maxlen=max(self.limit, 1))

    def append(self, message: str) -> str:
        """Append a timestamp-prefixed entry and return it."""
        entry = f"[{datetime.now(tz=UTC).isoformat()}] {message}"
        self._entries.append(entry)
        return entry

    def snapshot(self) -> list[str]:
        """Return a copy of the entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class DiagnosticRing:
    """Session-keyed access to diagnostic logs held by the session store.

    Appending to an unknown session is a silent no-op so diagnostics can
    never fail the operation that produced them.
    """

    store: "SessionStore"

    def append(
        self, session_id: str, message: str, level: int = logging.INFO
    ) -> None:
        """Append a trace entry to the session's log, if the session exists.

        The entry is also sent to the process log at the given level; page
        captures go out at DEBUG.
        """
        logger.log(level, message, extra={"session_id": session_id})
        session = self.store.get(session_id)
        if session is None:
            return
        session.diagnostic_log.append(message)

    def read(self, session_id: str) -> list[str]:
        """Return a snapshot of the session's log, or an empty list."""
        session = self.store.get(session_id)
        if session is None:
            return []
        return session.diagnostic_log.snapshot()
