"""In-memory registry of live automation sessions."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from order_spend.adapters.playwright_browser import BrowserSession
from order_spend.domain.errors import SessionExistsError, SessionLimitError
from order_spend.services.diagnostics import DEFAULT_LOG_LIMIT, DiagnosticLog

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ScrapeSession:
    """State for one login-and-extraction attempt."""

    session_id: str
    mobile_number: str
    browser: BrowserSession
    diagnostic_log: DiagnosticLog
    created_at: datetime = field(default_factory=_now)
    last_active_at: datetime = field(default_factory=_now)
    otp_attempts: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def touch(self) -> None:
        """Mark the session as active now."""
        self.last_active_at = _now()


@dataclass
class SessionStore:
    """Maps session ids to live sessions and owns their teardown."""

    log_limit: int = DEFAULT_LOG_LIMIT
    idle_timeout: timedelta | None = None
    max_sessions: int | None = None
    _sessions: dict[str, ScrapeSession] = field(
        default_factory=dict, init=False, repr=False
    )

    def create(
        self, session_id: str, mobile_number: str, browser: BrowserSession
    ) -> ScrapeSession:
        """Register a new session; live ids are never replaced."""
        if session_id in self._sessions:
            raise SessionExistsError(f"Session {session_id} is already active")
        if self.max_sessions is not None and len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(
                f"Too many active sessions (limit {self.max_sessions})"
            )
        session = ScrapeSession(
            session_id=session_id,
            mobile_number=mobile_number,
            browser=browser,
            diagnostic_log=DiagnosticLog(limit=self.log_limit),
        )
        self._sessions[session_id] = session
        logger.info("Session created", extra={"session_id": session_id})
        return session

    def get(self, session_id: str) -> ScrapeSession | None:
        """Return a live session by id, if present."""
        return self._sessions.get(session_id)

    async def destroy(self, session_id: str) -> bool:
        """Remove the session and release its browser.

        Removal happens before release so no other caller can pick the
        session up while its browser is closing. Returns false when the
        session was already gone.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        try:
            await session.browser.release()
        except Exception:
            logger.warning(
                "Browser release failed",
                extra={"session_id": session_id},
                exc_info=True,
            )
        logger.info("Session destroyed", extra={"session_id": session_id})
        return True

    async def sweep_expired(self, now: datetime | None = None) -> list[str]:
        """Destroy idle sessions that no phase is currently acting on."""
        if self.idle_timeout is None:
            return []
        current = now or _now()
        expired = [
            session.session_id
            for session in self._sessions.values()
            if not session.lock.locked()
            and current - session.last_active_at >= self.idle_timeout
        ]
        for session_id in expired:
            logger.info("Session expired", extra={"session_id": session_id})
            await self.destroy(session_id)
        return expired

    async def drain(self) -> int:
        """Destroy every live session."""
        session_ids = list(self._sessions)
        for session_id in session_ids:
            await self.destroy(session_id)
        return len(session_ids)

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
