"""Caller-facing entry points for the login, OTP and extraction workflow.

Every method here is a failure boundary: automation errors are logged,
recorded in the session's diagnostic log and returned as unsuccessful
outcomes instead of being raised.
"""

import asyncio
import logging
from dataclasses import dataclass

from order_spend.adapters.playwright_browser import BrowserFactory
from order_spend.domain.errors import (
    EmptyResultError,
    ScraperError,
    VerificationFailure,
)
from order_spend.domain.orders import OrderRecord
from order_spend.domain.outcomes import (
    CancelOutcome,
    ExtractionOutcome,
    LoginOutcome,
    OtpOutcome,
)
from order_spend.services.diagnostics import DiagnosticRing
from order_spend.services.extraction import ExtractionPhase
from order_spend.services.login import LoginDisposition, LoginPhase
from order_spend.services.otp import OtpPhase
from order_spend.services.session_store import ScrapeSession, SessionStore

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found or expired"
SESSION_BUSY = "Session is busy with another request"
ALREADY_LOGGED_IN = "Already logged in"
OTP_SENT = (
    "OTP sent to mobile number. Please submit OTP using /api/submit-otp endpoint"
)
OTP_ACCEPTED = "Login successful! You can now scrape orders."
OTP_INVALID = "Invalid OTP. Please try again."
OTP_EXHAUSTED = "Too many invalid OTP attempts. Please login again."
SESSION_CANCELLED = "Session was cancelled"
NO_ORDERS = (
    "No orders found. Please make sure you have orders in your Swiggy account."
)


@dataclass
class ScraperService:
    """Runs each workflow phase against the session named by the caller."""

    store: SessionStore
    browser_factory: BrowserFactory
    diagnostics: DiagnosticRing
    login_phase: LoginPhase
    otp_phase: OtpPhase
    extraction_phase: ExtractionPhase
    max_otp_attempts: int = 3
    debug_errors: bool = False

    async def begin_login(self, session_id: str, mobile_number: str) -> LoginOutcome:
        """Open a session and drive it to the OTP prompt."""
        await self.store.sweep_expired()
        try:
            session = self.store.create(
                session_id, mobile_number, self.browser_factory.create()
            )
        except ScraperError as exc:
            logger.warning("Login refused", extra={"session_id": session_id})
            return LoginOutcome(success=False, message=f"Login failed: {exc}")

        async with session.lock:
            try:
                disposition = await self.login_phase.run(session)
            except asyncio.CancelledError:
                await self.store.destroy(session_id)
                raise
            except Exception as exc:
                reason = self._describe(exc, session_id, "Login failed")
                diagnostic_log = self.diagnostics.read(session_id)
                await self.store.destroy(session_id)
                return LoginOutcome(
                    success=False,
                    message=f"Login failed: {reason}",
                    diagnostic_log=diagnostic_log,
                )
            if not await self._still_live(session):
                return LoginOutcome(
                    success=False, message=f"Login failed: {SESSION_CANCELLED}"
                )
            session.touch()

        needs_otp = disposition is LoginDisposition.OTP_REQUIRED
        return LoginOutcome(
            success=True,
            message=OTP_SENT if needs_otp else ALREADY_LOGGED_IN,
            session_id=session_id,
            needs_otp=needs_otp,
            diagnostic_log=self.diagnostics.read(session_id),
        )

    async def submit_otp(self, session_id: str, otp: str) -> OtpOutcome:
        """Submit an OTP; the session stays live unless attempts run out."""
        await self.store.sweep_expired()
        session = self.store.get(session_id)
        if session is None:
            return OtpOutcome(success=False, message=SESSION_NOT_FOUND)
        if session.lock.locked():
            return OtpOutcome(
                success=False,
                message=SESSION_BUSY,
                diagnostic_log=self.diagnostics.read(session_id),
            )

        async with session.lock:
            session.touch()
            try:
                await self.otp_phase.run(session, otp)
            except VerificationFailure:
                session.otp_attempts += 1
                if session.otp_attempts < self.max_otp_attempts:
                    return OtpOutcome(
                        success=False,
                        message=OTP_INVALID,
                        diagnostic_log=self.diagnostics.read(session_id),
                    )
                self.diagnostics.append(
                    session_id,
                    f"OTP rejected {session.otp_attempts} times; closing session",
                )
                diagnostic_log = self.diagnostics.read(session_id)
                await self.store.destroy(session_id)
                return OtpOutcome(
                    success=False, message=OTP_EXHAUSTED, diagnostic_log=diagnostic_log
                )
            except Exception as exc:
                reason = self._describe(exc, session_id, "OTP verification failed")
                return OtpOutcome(
                    success=False,
                    message=f"OTP verification failed: {reason}",
                    diagnostic_log=self.diagnostics.read(session_id),
                )
            if not await self._still_live(session):
                return OtpOutcome(success=False, message=SESSION_CANCELLED)

        return OtpOutcome(
            success=True,
            message=OTP_ACCEPTED,
            diagnostic_log=self.diagnostics.read(session_id),
        )

    async def extract_orders(self, session_id: str) -> ExtractionOutcome:
        """Scrape the order history, then always tear the session down."""
        await self.store.sweep_expired()
        session = self.store.get(session_id)
        if session is None:
            return ExtractionOutcome(
                success=False, message=f"{SESSION_NOT_FOUND}. Please login first."
            )
        if session.lock.locked():
            return ExtractionOutcome(
                success=False,
                message=SESSION_BUSY,
                diagnostic_log=self.diagnostics.read(session_id),
            )

        orders: list[OrderRecord] = []
        async with session.lock:
            session.touch()
            try:
                orders = await self.extraction_phase.run(session)
                message = f"Successfully scraped {len(orders)} orders"
            except EmptyResultError:
                message = NO_ORDERS
            except Exception as exc:
                reason = self._describe(exc, session_id, "Scraping failed")
                message = f"Scraping failed: {reason}"
            finally:
                self.diagnostics.append(session_id, "Closing browser")
                diagnostic_log = self.diagnostics.read(session_id)
                await self.store.destroy(session_id)

        return ExtractionOutcome(
            success=bool(orders),
            message=message,
            orders=orders,
            diagnostic_log=diagnostic_log,
        )

    async def cancel(self, session_id: str) -> CancelOutcome:
        """Tear down the session if it is still live."""
        if await self.store.destroy(session_id):
            logger.info("Session cancelled", extra={"session_id": session_id})
        return CancelOutcome()

    async def shutdown(self) -> None:
        """Release every live session."""
        drained = await self.store.drain()
        if drained:
            logger.info("Released %d sessions on shutdown", drained)

    async def _still_live(self, session: ScrapeSession) -> bool:
        """Return false when the session was cancelled while a phase ran."""
        if self.store.get(session.session_id) is session:
            return True
        logger.info(
            "Session cancelled during phase", extra={"session_id": session.session_id}
        )
        await session.browser.release()
        return False

    def _describe(self, exc: Exception, session_id: str, context: str) -> str:
        """Log a phase failure and return the caller-facing reason."""
        reason = str(exc) or type(exc).__name__
        if isinstance(exc, ScraperError):
            logger.warning(
                "%s: %s", context, reason, extra={"session_id": session_id}
            )
        else:
            logger.exception(context, extra={"session_id": session_id})
            if self.debug_errors:
                reason = f"{reason} (debug: {type(exc).__name__})"
        self.diagnostics.append(session_id, f"{context}: {reason}")
        return reason
