import functools
import logging
import time as time_module
from collections.abc import Callable
from typing import Any, TypeVar

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions
from selenium.webdriver.support.ui import WebDriverWait

from padel_booker.providers.base import PageHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_EXCEPTIONS = (
    StaleElementReferenceException,
    ElementClickInterceptedException,
)

TYPING_DELAY_SECONDS = 0.015


def with_retry(
    max_attempts: int = 3,
    backoff_base: float = 0.5,
    exceptions: tuple[type[Exception], ...] = TRANSIENT_EXCEPTIONS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for retrying operations that may fail due to transient Selenium issues.

    Uses exponential backoff between attempts. Only retries on specified exception types.

    Args:
        max_attempts: Maximum number of attempts (default 3)
        backoff_base: Base delay in seconds, doubled each attempt (default 0.5)
        exceptions: Tuple of exception types to retry on
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < max_attempts - 1:
                        delay = backoff_base * (2**attempt)
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {e}. "
                            f"Retrying in {delay:.1f}s..."
                        )
                        time_module.sleep(delay)
                    else:
                        logger.error(f"All {max_attempts} attempts failed for {func.__name__}: {e}")
            raise last_exception  # type: ignore[misc]

        return wrapper

    return decorator


class SeleniumPage(PageHandle):
    """PageHandle backed by a Selenium WebDriver (local Chrome or remote grid)."""

    def __init__(self, driver: WebDriver) -> None:
        self.driver = driver

    def html(self) -> str:
        return self.driver.page_source

    def current_url(self) -> str:
        return self.driver.current_url

    def goto(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        self.driver.get(url)

    def reload(self) -> None:
        self.driver.refresh()

    def count(self, selector: str) -> int:
        return len(self.driver.find_elements(By.CSS_SELECTOR, selector))

    def is_visible(self, selector: str) -> bool:
        try:
            return any(
                element.is_displayed()
                for element in self.driver.find_elements(By.CSS_SELECTOR, selector)
            )
        except StaleElementReferenceException:
            return False

    def _nth(self, selector: str, index: int) -> Any:
        elements = self.driver.find_elements(By.CSS_SELECTOR, selector)
        if index >= len(elements):
            raise NoSuchElementException(
                f"No element #{index} for '{selector}' ({len(elements)} found)"
            )
        return elements[index]

    @with_retry()
    def text_of(self, selector: str, index: int = 0) -> str | None:
        try:
            return self._nth(selector, index).text
        except NoSuchElementException:
            return None

    @with_retry()
    def attribute_of(self, selector: str, name: str, index: int = 0) -> str | None:
        try:
            return self._nth(selector, index).get_attribute(name)
        except NoSuchElementException:
            return None

    @with_retry()
    def click(self, selector: str, index: int = 0) -> None:
        element = self._nth(selector, index)
        self.driver.execute_script("arguments[0].scrollIntoView({block: 'center'});", element)
        # JavaScript click bypasses overlays the grid renders over cells
        self.driver.execute_script("arguments[0].click();", element)

    def type_text(self, selector: str, text: str) -> None:
        element = WebDriverWait(self.driver, 10).until(
            expected_conditions.element_to_be_clickable((By.CSS_SELECTOR, selector))
        )
        element.clear()
        for char in text:
            element.send_keys(char)
            time_module.sleep(TYPING_DELAY_SECONDS)

    def wait_for_navigation(self, previous_url: str, timeout: float) -> bool:
        try:
            WebDriverWait(self.driver, timeout).until(
                expected_conditions.url_changes(previous_url)
            )
            return True
        except TimeoutException:
            return False

    def close(self) -> None:
        self.driver.quit()
