"""Errors raised by the automation workflow."""


class ScraperError(Exception):
    """Base class for expected automation failures."""


class LaunchError(ScraperError):
    """The browser runtime could not start a browser process."""


class NavigationError(ScraperError):
    """A page load timed out or failed at the network level."""


class BrowserClosedError(ScraperError):
    """The browser was released while a phase still needed it."""


class InputNotFoundError(ScraperError):
    """An expected form control is absent from the page."""

    def __init__(self, control: str) -> None:
        super().__init__(f"Could not find {control} field")
        self.control = control


class VerificationFailure(ScraperError):
    """The page explicitly rejected the submitted OTP."""


class EmptyResultError(ScraperError):
    """Extraction finished without a single complete order record."""


class SessionExistsError(ScraperError):
    """A live session already uses the requested id."""


class SessionLimitError(ScraperError):
    """The store already holds the maximum number of live sessions."""
