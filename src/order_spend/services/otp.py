"""OTP phase: submit the one-time password and check for rejection."""

import logging
from dataclasses import dataclass

from order_spend.config import PhaseTimings
from order_spend.domain.errors import InputNotFoundError, VerificationFailure
from order_spend.page_selectors import OTP_FAILURE_MARKERS, PageControl
from order_spend.services.diagnostics import DiagnosticRing
from order_spend.services.session_store import ScrapeSession

PREVIEW_CHARS = 500


@dataclass
class OtpPhase:
    """Fills the OTP form on a session waiting for a code."""

    timings: PhaseTimings
    diagnostics: DiagnosticRing

    async def run(self, session: ScrapeSession, otp: str) -> None:
        """Submit the code; raises VerificationFailure when the page rejects it."""
        browser = session.browser
        otp_chain = PageControl.OTP_INPUT.value
        otp_input = await browser.query_first(otp_chain.selectors)
        if otp_input is None:
            self._log(session, "OTP input not found")
            raise InputNotFoundError(otp_chain.description)
        self._log(session, f"Entering OTP ({otp_input.selector})")
        await browser.fill(otp_input, otp)
        await browser.pause(self.timings.fill_delay_ms)

        verify = await browser.query_first(PageControl.VERIFY.value.selectors)
        if verify is None:
            self._log(session, "No verify button found; waiting for auto-submit")
        else:
            self._log(session, f"Submitting OTP ({verify.selector})")
            await browser.click(verify)
        await browser.pause(self.timings.verify_delay_ms)

        page_text = await browser.body_text()
        rejected = [marker for marker in OTP_FAILURE_MARKERS if marker in page_text]
        if rejected:
            self._log(session, f"OTP rejected ({', '.join(rejected)})")
            self._log(
                session,
                f"Page preview: {page_text[:PREVIEW_CHARS]}",
                level=logging.DEBUG,
            )
            raise VerificationFailure("Invalid OTP")
        self._log(session, "OTP accepted")

    def _log(
        self, session: ScrapeSession, message: str, level: int = logging.INFO
    ) -> None:
        self.diagnostics.append(session.session_id, message, level=level)
