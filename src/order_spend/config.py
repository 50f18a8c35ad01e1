"""Application configuration."""

import os
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    orders_url: str = "https://www.swiggy.com/my-account/orders"
    orders_path_marker: str = "my-account/orders"
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    launch_timeout_ms: int = 30000
    navigation_timeout_ms: int = 30000
    settle_delay_ms: int = 2000
    login_click_delay_ms: int = 1500
    fill_delay_ms: int = 500
    submit_delay_ms: int = 2000
    verify_delay_ms: int = 3000
    extraction_settle_delay_ms: int = 3000
    scroll_rounds: int = 5
    scroll_delay_ms: int = 1500
    diagnostic_log_limit: int = 50
    session_idle_timeout_seconds: int | None = 600
    max_otp_attempts: int = 3
    max_sessions: int | None = 10
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


@dataclass(frozen=True)
class PhaseTimings:
    """Fixed pauses and budgets used by the automation phases, in milliseconds."""

    navigation_timeout_ms: int = 30000
    settle_delay_ms: int = 2000
    login_click_delay_ms: int = 1500
    fill_delay_ms: int = 500
    submit_delay_ms: int = 2000
    verify_delay_ms: int = 3000
    extraction_settle_delay_ms: int = 3000
    scroll_rounds: int = 5
    scroll_delay_ms: int = 1500


def build_phase_timings(settings: Settings) -> PhaseTimings:
    """Collect phase pauses from settings."""
    return PhaseTimings(
        navigation_timeout_ms=settings.navigation_timeout_ms,
        settle_delay_ms=settings.settle_delay_ms,
        login_click_delay_ms=settings.login_click_delay_ms,
        fill_delay_ms=settings.fill_delay_ms,
        submit_delay_ms=settings.submit_delay_ms,
        verify_delay_ms=settings.verify_delay_ms,
        extraction_settle_delay_ms=settings.extraction_settle_delay_ms,
        scroll_rounds=max(settings.scroll_rounds, 0),
        scroll_delay_ms=settings.scroll_delay_ms,
    )
