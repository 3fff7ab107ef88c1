class BookingError(Exception):
    """Base class for failures that abort a booking attempt."""


class ElementNotFoundError(BookingError):
    def __init__(self, selector: str, timeout: float, description: str | None = None) -> None:
        self.selector = selector
        self.timeout = timeout
        what = description or selector
        super().__init__(f"{what} not found after waiting {timeout:g}s")


class ButtonNotFoundError(ElementNotFoundError):
    """The confirmation modal's primary button never appeared for a step."""

    def __init__(self, label: str, selector: str, timeout: float) -> None:
        self.label = label
        super().__init__(selector, timeout, description=f"{label} button")


class ClickRejectedError(BookingError):
    """The primary button's label did not match the step at click time."""

    def __init__(self, label: str, actual_text: str | None) -> None:
        self.label = label
        self.actual_text = actual_text
        super().__init__(
            f"Failed to click {label} button: found '{actual_text or ''}' instead"
        )


class NavigationError(BookingError):
    pass


class LoginError(BookingError):
    pass


class ReleaseSubjectError(BookingError):
    """A court-release email subject could not be used."""
