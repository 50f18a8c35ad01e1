"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from order_spend.adapters.playwright_browser import (
    BrowserFactory,
    BrowserSession,
    SelectorMatch,
)
from order_spend.config import Settings
from order_spend.containers import (
    AppContainer,
    build_scraper_service,
    build_session_store,
)
from order_spend.domain.errors import BrowserClosedError
from order_spend.page_selectors import LOGIN_BUTTON_TEST_ID
from order_spend.services.scraper import ScraperService
from order_spend.services.session_store import SessionStore

MOBILE_INPUT = 'input[type="tel"]'
CONTINUE_BUTTON = 'button:has-text("Continue")'
OTP_INPUT = 'input[type="text"]'
VERIFY_BUTTON = 'button:has-text("Verify")'


@dataclass
class FakeElement:
    """Stand-in for a Playwright element handle."""

    selector: str


@dataclass
class FakeBrowserSession(BrowserSession):
    """Scripted browser that records every interaction.

    With strict=False it keeps answering after release, like a driver that
    finished starting up after the session was cancelled.
    """

    present: set[str] = field(default_factory=set)
    page_text: str = ""
    order_texts: list[str] = field(default_factory=list)
    click_text: dict[str, str] = field(default_factory=dict)
    landing_url: str | None = None
    launch_error: Exception | None = None
    navigation_error: Exception | None = None
    strict: bool = True
    url: str = ""
    launched: bool = False
    released: bool = False
    release_calls: int = 0
    navigations: list[str] = field(default_factory=list)
    pauses: list[int] = field(default_factory=list)
    scrolls: int = 0
    filled: dict[str, str] = field(default_factory=dict)
    clicked: list[str] = field(default_factory=list)

    @property
    def current_url(self) -> str:
        return self.url

    @property
    def is_released(self) -> bool:
        return self.released

    async def launch(self) -> None:
        if self.launch_error is not None:
            raise self.launch_error
        self.launched = True

    async def navigate(self, url: str, timeout_ms: int = 30000) -> str:
        self._check_open()
        self.navigations.append(url)
        if self.navigation_error is not None:
            raise self.navigation_error
        self.url = self.landing_url or url
        return self.url

    async def pause(self, delay_ms: int) -> None:
        self._check_open()
        self.pauses.append(delay_ms)

    async def query_first(self, selectors: tuple[str, ...]) -> SelectorMatch | None:
        self._check_open()
        for selector in selectors:
            if selector in self.present:
                return SelectorMatch(selector=selector, element=FakeElement(selector))
        return None

    async def has_element(self, selector: str) -> bool:
        self._check_open()
        return selector in self.present

    async def body_text(self) -> str:
        self._check_open()
        return self.page_text

    async def fill(self, match: SelectorMatch, value: str) -> None:
        self._check_open()
        self.filled[match.selector] = value

    async def click(self, match: SelectorMatch) -> None:
        self._check_open()
        self.clicked.append(match.selector)
        if match.selector in self.click_text:
            self.page_text = self.click_text[match.selector]

    async def scroll_to_bottom(self) -> None:
        self._check_open()
        self.scrolls += 1

    async def texts_of(self, selector: str) -> list[str]:
        self._check_open()
        return list(self.order_texts)

    async def release(self) -> None:
        self.release_calls += 1
        self.released = True

    def _check_open(self) -> None:
        if self.strict and self.released:
            raise BrowserClosedError("Browser session has been released")


@dataclass
class FakeBrowserFactory(BrowserFactory):
    """Hands out queued fake browsers, then blank ones."""

    queued: list[FakeBrowserSession] = field(default_factory=list)
    created: list[FakeBrowserSession] = field(default_factory=list)

    def create(self) -> FakeBrowserSession:
        browser = self.queued.pop(0) if self.queued else FakeBrowserSession()
        self.created.append(browser)
        return browser


def login_page(**overrides: object) -> FakeBrowserSession:
    """Browser showing a login form that asks for an OTP."""
    values: dict[str, object] = {
        "present": {
            LOGIN_BUTTON_TEST_ID,
            MOBILE_INPUT,
            CONTINUE_BUTTON,
            OTP_INPUT,
            VERIFY_BUTTON,
        },
        "page_text": "Login\nEnter your phone number",
        "click_text": {VERIFY_BUTTON: "My Account\nOrders"},
    }
    values.update(overrides)
    return FakeBrowserSession(**values)  # type: ignore[arg-type]


def logged_in_page(**overrides: object) -> FakeBrowserSession:
    """Browser whose order history is already visible."""
    values: dict[str, object] = {"page_text": "My Account\nPast Orders"}
    values.update(overrides)
    return FakeBrowserSession(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        settle_delay_ms=0,
        login_click_delay_ms=0,
        fill_delay_ms=0,
        submit_delay_ms=0,
        verify_delay_ms=0,
        extraction_settle_delay_ms=0,
        scroll_delay_ms=0,
        environment="test",
    )


@pytest.fixture
def browser_factory() -> FakeBrowserFactory:
    return FakeBrowserFactory()


@pytest.fixture
def session_store(settings: Settings) -> SessionStore:
    return build_session_store(settings)


@pytest.fixture
def scraper_service(
    settings: Settings,
    session_store: SessionStore,
    browser_factory: FakeBrowserFactory,
) -> ScraperService:
    return build_scraper_service(settings, session_store, browser_factory)


@pytest.fixture
def container(
    settings: Settings,
    session_store: SessionStore,
    scraper_service: ScraperService,
) -> AppContainer:
    async def close_resources() -> None:
        await scraper_service.shutdown()

    return AppContainer(
        settings=settings,
        session_store=session_store,
        scraper_service=scraper_service,
        close_resources=close_resources,
    )
