"""Playwright-backed browser session adapter."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from order_spend.config import DEFAULT_USER_AGENT
from order_spend.domain.errors import BrowserClosedError, LaunchError, NavigationError

logger = logging.getLogger(__name__)

CHROMIUM_ARGS: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")

_BODY_TEXT_JS = "() => document.body ? document.body.innerText : ''"
_SCROLL_TO_BOTTOM_JS = "() => window.scrollTo(0, document.body.scrollHeight)"


@dataclass(frozen=True)
class SelectorMatch:
    """An element located through a selector fallback chain."""

    selector: str
    element: ElementHandle


class BrowserSession(Protocol):
    """Interface for one browser instance with a single page."""

    @property
    def current_url(self) -> str:
        """Return the page's current location."""

    @property
    def is_released(self) -> bool:
        """Return true once release() has been called."""

    async def launch(self) -> None:
        """Start the browser, its context and its page."""

    async def navigate(self, url: str, timeout_ms: int = 30000) -> str:
        """Load a URL, wait for network idle and return the resulting URL."""

    async def pause(self, delay_ms: int) -> None:
        """Wait a fixed number of milliseconds."""

    async def query_first(self, selectors: tuple[str, ...]) -> SelectorMatch | None:
        """Return the first element matched by the ordered selectors."""

    async def has_element(self, selector: str) -> bool:
        """Return true when the selector matches an element."""

    async def body_text(self) -> str:
        """Return the rendered text of the document body."""

    async def fill(self, match: SelectorMatch, value: str) -> None:
        """Fill a located input."""

    async def click(self, match: SelectorMatch) -> None:
        """Click a located control."""

    async def scroll_to_bottom(self) -> None:
        """Scroll the page to the bottom of the document."""

    async def texts_of(self, selector: str) -> list[str]:
        """Return the rendered text of every element matching the selector."""

    async def release(self) -> None:
        """Close the browser; never raises."""


class BrowserFactory(Protocol):
    """Creates unlaunched browser sessions."""

    def create(self) -> BrowserSession:
        """Return a new browser session."""


@dataclass
class PlaywrightBrowserSession(BrowserSession):
    """Browser session driving headless Chromium through Playwright."""

    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    launch_timeout_ms: int = 30000
    launch_args: tuple[str, ...] = CHROMIUM_ARGS
    _playwright: Playwright | None = field(default=None, init=False, repr=False)
    _browser: Browser | None = field(default=None, init=False, repr=False)
    _context: BrowserContext | None = field(default=None, init=False, repr=False)
    _page: Page | None = field(default=None, init=False, repr=False)
    _released: bool = field(default=False, init=False, repr=False)

    @property
    def current_url(self) -> str:
        """Return the page URL, or an empty string before launch."""
        return self._page.url if self._page is not None else ""

    @property
    def is_released(self) -> bool:
        return self._released

    async def launch(self) -> None:
        """Launch Chromium and open one context with a fixed user agent."""
        if self._released:
            raise BrowserClosedError("Browser session has been released")
        try:
            self._playwright = await async_playwright().start()
            await self._abort_if_released()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=list(self.launch_args),
                timeout=self.launch_timeout_ms,
            )
            await self._abort_if_released()
            self._context = await self._browser.new_context(user_agent=self.user_agent)
            await self._abort_if_released()
            self._page = await self._context.new_page()
            await self._abort_if_released()
        except BrowserClosedError:
            raise
        except Exception as exc:
            await self.release()
            raise LaunchError(f"Browser launch failed: {exc}") from exc
        logger.info("Browser launched", extra={"headless": self.headless})

    async def navigate(self, url: str, timeout_ms: int = 30000) -> str:
        """Load a URL and wait for network idle."""
        page = self._require_page()
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(
                f"Timed out after {timeout_ms} ms loading {url}"
            ) from exc
        except PlaywrightError as exc:
            raise NavigationError(f"Failed to load {url}: {exc.message}") from exc
        return page.url

    async def pause(self, delay_ms: int) -> None:
        """Wait on the page clock."""
        if delay_ms <= 0:
            return
        await self._require_page().wait_for_timeout(delay_ms)

    async def query_first(self, selectors: tuple[str, ...]) -> SelectorMatch | None:
        """Try each selector in order; lookup errors count as no match."""
        page = self._require_page()
        for selector in selectors:
            try:
                element = await page.query_selector(selector)
            except PlaywrightError:
                logger.debug("Selector lookup failed", extra={"selector": selector})
                continue
            if element is not None:
                return SelectorMatch(selector=selector, element=element)
        return None

    async def has_element(self, selector: str) -> bool:
        return await self.query_first((selector,)) is not None

    async def body_text(self) -> str:
        text = await self._require_page().evaluate(_BODY_TEXT_JS)
        return text or ""

    async def fill(self, match: SelectorMatch, value: str) -> None:
        await match.element.fill(value)

    async def click(self, match: SelectorMatch) -> None:
        await match.element.click()

    async def scroll_to_bottom(self) -> None:
        await self._require_page().evaluate(_SCROLL_TO_BOTTOM_JS)

    async def texts_of(self, selector: str) -> list[str]:
        return await self._require_page().locator(selector).all_inner_texts()

    async def release(self) -> None:
        """Close the browser and stop the driver, logging but never raising."""
        browser, playwright = self._browser, self._playwright
        self._released = True
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None
        if browser is not None:
            try:
                await browser.close()
            except Exception:
                logger.warning("Failed to close browser", exc_info=True)
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception:
                logger.warning("Failed to stop Playwright driver", exc_info=True)

    async def _abort_if_released(self) -> None:
        """Tear down handles created after a concurrent release()."""
        if not self._released:
            return
        await self.release()
        raise BrowserClosedError("Browser session was released during launch")

    def _require_page(self) -> Page:
        if self._page is None:
            if self._released:
                raise BrowserClosedError("Browser session has been released")
            raise BrowserClosedError("Browser session has not been launched")
        return self._page


@dataclass
class PlaywrightBrowserFactory(BrowserFactory):
    """Factory producing Playwright browser sessions with shared launch options."""

    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    launch_timeout_ms: int = 30000

    def create(self) -> PlaywrightBrowserSession:
        """Return a new, unlaunched browser session."""
        return PlaywrightBrowserSession(
            headless=self.headless,
            user_agent=self.user_agent,
            launch_timeout_ms=self.launch_timeout_ms,
        )

