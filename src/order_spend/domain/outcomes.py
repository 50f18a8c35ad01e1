"""Results returned by the caller-facing scraper operations."""

from dataclasses import dataclass, field

from order_spend.domain.orders import OrderRecord


@dataclass(frozen=True)
class LoginOutcome:
    """Disposition of a login attempt."""

    success: bool
    message: str
    session_id: str | None = None
    needs_otp: bool = False
    diagnostic_log: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OtpOutcome:
    """Result of an OTP submission."""

    success: bool
    message: str
    diagnostic_log: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractionOutcome:
    """Result of an order extraction run."""

    success: bool
    message: str
    orders: list[OrderRecord] = field(default_factory=list)
    diagnostic_log: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CancelOutcome:
    """Cancellation always succeeds."""

    success: bool = True
