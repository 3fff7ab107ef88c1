from abc import ABC, abstractmethod
from dataclasses import dataclass


class PageHandle(ABC):
    """A live browser tab the booking flow drives.

    All calls are blocking and must be issued one at a time; the page is a
    single shared DOM.
    """

    @abstractmethod
    def html(self) -> str:
        """Return a snapshot of the current document."""
        pass

    @abstractmethod
    def current_url(self) -> str:
        pass

    @abstractmethod
    def goto(self, url: str) -> None:
        pass

    @abstractmethod
    def reload(self) -> None:
        pass

    @abstractmethod
    def count(self, selector: str) -> int:
        """Number of elements currently matching a CSS selector."""
        pass

    @abstractmethod
    def is_visible(self, selector: str) -> bool:
        """True if at least one element matching the selector is displayed."""
        pass

    @abstractmethod
    def text_of(self, selector: str, index: int = 0) -> str | None:
        """Text of the nth match, or None if there is no such element."""
        pass

    @abstractmethod
    def attribute_of(self, selector: str, name: str, index: int = 0) -> str | None:
        pass

    @abstractmethod
    def click(self, selector: str, index: int = 0) -> None:
        """Click the nth element matching the selector."""
        pass

    @abstractmethod
    def type_text(self, selector: str, text: str) -> None:
        pass

    @abstractmethod
    def wait_for_navigation(self, previous_url: str, timeout: float) -> bool:
        """Wait until the URL differs from previous_url. Returns False on timeout."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass


@dataclass
class BrowserSession:
    id: str
    page: PageHandle
    live_url: str | None = None
    profile_id: str | None = None


class SessionProvisioner(ABC):
    """Creates and releases browser sessions for booking runs."""

    @abstractmethod
    def create(self, profile_id: str | None = None) -> BrowserSession:
        pass

    @abstractmethod
    def stop(self, session: BrowserSession) -> None:
        pass
