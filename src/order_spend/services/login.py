"""Login phase: open the order history and submit the mobile number."""

from dataclasses import dataclass
from enum import Enum

from order_spend.config import PhaseTimings
from order_spend.domain.errors import InputNotFoundError
from order_spend.page_selectors import (
    LOGIN_BUTTON_TEST_ID,
    LOGIN_TEXT_MARKER,
    PageControl,
)
from order_spend.services.diagnostics import DiagnosticRing
from order_spend.services.session_store import ScrapeSession


class LoginDisposition(Enum):
    """Where the login phase left the session."""

    AUTHENTICATED = "authenticated"
    OTP_REQUIRED = "otp_required"


@dataclass
class LoginPhase:
    """Drives a fresh session up to the OTP prompt."""

    orders_url: str
    timings: PhaseTimings
    diagnostics: DiagnosticRing

    async def run(self, session: ScrapeSession) -> LoginDisposition:
        """Launch, navigate and submit the mobile number.

        Raises LaunchError, NavigationError or InputNotFoundError; the caller
        owns teardown on failure.
        """
        browser = session.browser
        self._log(session, "Launching browser")
        await browser.launch()
        self._log(session, f"Navigating to {self.orders_url}")
        landed_url = await browser.navigate(
            self.orders_url, timeout_ms=self.timings.navigation_timeout_ms
        )
        self._log(session, f"Page loaded: {landed_url}")
        await browser.pause(self.timings.settle_delay_ms)

        if await self._is_authenticated(session):
            self._log(session, "Already logged in; no OTP needed")
            return LoginDisposition.AUTHENTICATED

        entry = await browser.query_first(PageControl.LOGIN_ENTRY.value.selectors)
        if entry is None:
            self._log(session, "No login entry point found; form may already be open")
        else:
            self._log(session, f"Clicking login entry point ({entry.selector})")
            await browser.click(entry)
            await browser.pause(self.timings.login_click_delay_ms)

        mobile_chain = PageControl.MOBILE_INPUT.value
        mobile_input = await browser.query_first(mobile_chain.selectors)
        if mobile_input is None:
            self._log(session, "Mobile number input not found")
            raise InputNotFoundError(mobile_chain.description)
        self._log(session, f"Entering mobile number ({mobile_input.selector})")
        await browser.fill(mobile_input, session.mobile_number)
        await browser.pause(self.timings.fill_delay_ms)

        submit = await browser.query_first(PageControl.SEND_CODE.value.selectors)
        if submit is None:
            self._log(session, "No continue button found; relying on auto-submit")
        else:
            self._log(session, f"Requesting OTP ({submit.selector})")
            await browser.click(submit)
        await browser.pause(self.timings.submit_delay_ms)

        self._log(session, "OTP requested; waiting for code")
        return LoginDisposition.OTP_REQUIRED

    async def _is_authenticated(self, session: ScrapeSession) -> bool:
        browser = session.browser
        if await browser.has_element(LOGIN_BUTTON_TEST_ID):
            return False
        return LOGIN_TEXT_MARKER not in await browser.body_text()

    def _log(self, session: ScrapeSession, message: str) -> None:
        self.diagnostics.append(session.session_id, message)
