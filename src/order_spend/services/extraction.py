"""Extraction phase: load the order history and parse the order cards."""

from dataclasses import dataclass

from order_spend.config import PhaseTimings
from order_spend.domain.errors import EmptyResultError
from order_spend.domain.orders import OrderRecord
from order_spend.page_selectors import ORDER_CARD_SELECTOR
from order_spend.services.diagnostics import DiagnosticRing
from order_spend.services.order_parsing import parse_order_texts
from order_spend.services.session_store import ScrapeSession


@dataclass
class ExtractionPhase:
    """Scrolls the order history into view and turns cards into records."""

    orders_url: str
    orders_path_marker: str
    timings: PhaseTimings
    diagnostics: DiagnosticRing

    async def run(self, session: ScrapeSession) -> list[OrderRecord]:
        """Return the parsed orders; raises EmptyResultError when none parse."""
        browser = session.browser
        if self.orders_path_marker not in browser.current_url:
            self._log(session, f"Navigating to {self.orders_url}")
            landed_url = await browser.navigate(
                self.orders_url, timeout_ms=self.timings.navigation_timeout_ms
            )
            self._log(session, f"Page loaded: {landed_url}")
        await browser.pause(self.timings.extraction_settle_delay_ms)

        for _ in range(self.timings.scroll_rounds):
            await browser.scroll_to_bottom()
            await browser.pause(self.timings.scroll_delay_ms)
        self._log(session, f"Scrolled {self.timings.scroll_rounds} times")

        texts = await browser.texts_of(ORDER_CARD_SELECTOR)
        orders = parse_order_texts(texts)
        self._log(
            session, f"Parsed {len(orders)} orders from {len(texts)} order elements"
        )
        if not orders:
            raise EmptyResultError("No orders found")
        return orders

    def _log(self, session: ScrapeSession, message: str) -> None:
        self.diagnostics.append(session.session_id, message)
