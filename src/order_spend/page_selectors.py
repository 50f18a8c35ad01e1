"""Selector fallback chains for the order-history site."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SelectorChain:
    """Ordered candidate selectors for one page control; first match wins."""

    description: str
    selectors: tuple[str, ...]


LOGIN_BUTTON_TEST_ID = '[data-testid="login-button"]'
LOGIN_TEXT_MARKER = "Login"
OTP_FAILURE_MARKERS: tuple[str, ...] = ("Invalid OTP", "incorrect")
ORDER_CARD_SELECTOR = '[class*="order"]'


class PageControl(Enum):
    """Enum of page controls the workflow interacts with."""

    LOGIN_ENTRY = SelectorChain(
        "login entry point",
        (
            LOGIN_BUTTON_TEST_ID,
            "text=Login",
            'button:has-text("Login")',
        ),
    )
    MOBILE_INPUT = SelectorChain(
        "mobile number input",
        (
            'input[type="tel"]',
            'input[placeholder*="phone"]',
            'input[placeholder*="mobile"]',
            'input[name="mobile"]',
        ),
    )
    SEND_CODE = SelectorChain(
        "continue button",
        (
            'button:has-text("Continue")',
            'button:has-text("Send OTP")',
            'button[type="submit"]',
        ),
    )
    OTP_INPUT = SelectorChain(
        "OTP input",
        (
            'input[type="text"]',
            'input[placeholder*="OTP"]',
            'input[name="otp"]',
        ),
    )
    VERIFY = SelectorChain(
        "verify button",
        (
            'button:has-text("Verify")',
            'button:has-text("Continue")',
            'button[type="submit"]',
        ),
    )
