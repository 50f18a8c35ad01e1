"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from order_spend.adapters.playwright_browser import (
    BrowserFactory,
    PlaywrightBrowserFactory,
)
from order_spend.config import Settings, build_phase_timings
from order_spend.services.diagnostics import DiagnosticRing
from order_spend.services.extraction import ExtractionPhase
from order_spend.services.login import LoginPhase
from order_spend.services.otp import OtpPhase
from order_spend.services.scraper import ScraperService
from order_spend.services.session_store import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    scraper_service: ScraperService
    close_resources: Callable[[], Awaitable[None]]


def build_session_store(settings: Settings) -> SessionStore:
    """Create an empty session store sized from settings."""
    idle_timeout = (
        timedelta(seconds=settings.session_idle_timeout_seconds)
        if settings.session_idle_timeout_seconds
        else None
    )
    return SessionStore(
        log_limit=settings.diagnostic_log_limit,
        idle_timeout=idle_timeout,
        max_sessions=settings.max_sessions,
    )


def build_scraper_service(
    settings: Settings, store: SessionStore, browser_factory: BrowserFactory
) -> ScraperService:
    """Wire the workflow phases around a session store."""
    timings = build_phase_timings(settings)
    diagnostics = DiagnosticRing(store)
    return ScraperService(
        store=store,
        browser_factory=browser_factory,
        diagnostics=diagnostics,
        login_phase=LoginPhase(
            orders_url=settings.orders_url,
            timings=timings,
            diagnostics=diagnostics,
        ),
        otp_phase=OtpPhase(timings=timings, diagnostics=diagnostics),
        extraction_phase=ExtractionPhase(
            orders_url=settings.orders_url,
            orders_path_marker=settings.orders_path_marker,
            timings=timings,
            diagnostics=diagnostics,
        ),
        max_otp_attempts=settings.max_otp_attempts,
        debug_errors=settings.environment == "local",
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = build_session_store(resolved_settings)
    browser_factory = PlaywrightBrowserFactory(
        headless=resolved_settings.headless,
        user_agent=resolved_settings.user_agent,
        launch_timeout_ms=resolved_settings.launch_timeout_ms,
    )
    scraper_service = build_scraper_service(
        resolved_settings, session_store, browser_factory
    )

    async def close_resources() -> None:
        await scraper_service.shutdown()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        scraper_service=scraper_service,
        close_resources=close_resources,
    )
