"""
Tests for the Selenium-backed page handle and retry decorator in
padel_booker/providers/selenium_page.py.

The WebDriver is mocked; no browser is started.
"""

from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.common.by import By

from padel_booker.providers.selenium_page import SeleniumPage, with_retry


class TestWithRetry:
    """Tests for the with_retry decorator."""

    def test_retries_transient_errors(self) -> None:
        """Test that a stale element is retried with exponential backoff."""
        calls = MagicMock(side_effect=[StaleElementReferenceException(), "ok"])

        @with_retry(max_attempts=3, backoff_base=0.5)
        def flaky() -> str:
            return calls()

        with patch("padel_booker.providers.selenium_page.time_module.sleep") as mock_sleep:
            assert flaky() == "ok"

        mock_sleep.assert_called_once_with(0.5)

    def test_gives_up_after_max_attempts(self) -> None:
        """Test that the last transient error is raised once attempts run out."""

        @with_retry(max_attempts=2, backoff_base=0.1)
        def always_intercepted() -> None:
            raise ElementClickInterceptedException("overlay")

        with patch("padel_booker.providers.selenium_page.time_module.sleep") as mock_sleep:
            with pytest.raises(ElementClickInterceptedException):
                always_intercepted()

        assert mock_sleep.call_count == 1

    def test_other_errors_propagate_immediately(self) -> None:
        """Test that non-transient errors are not retried."""
        calls = MagicMock(side_effect=ValueError("bad"))

        @with_retry()
        def broken() -> None:
            calls()

        with pytest.raises(ValueError):
            broken()
        assert calls.call_count == 1


@pytest.fixture
def driver() -> MagicMock:
    return MagicMock()


@pytest.fixture
def page(driver: MagicMock) -> SeleniumPage:
    return SeleniumPage(driver)


class TestSeleniumPage:
    """Tests for SeleniumPage."""

    def test_html_and_url(self, page: SeleniumPage, driver: MagicMock) -> None:
        driver.page_source = "<html></html>"
        driver.current_url = "https://club.example.com/"

        assert page.html() == "<html></html>"
        assert page.current_url() == "https://club.example.com/"

    def test_count_uses_css_selector(self, page: SeleniumPage, driver: MagicMock) -> None:
        driver.find_elements.return_value = [MagicMock(), MagicMock()]

        assert page.count(".BookingGrid-cell.Slot") == 2
        driver.find_elements.assert_called_once_with(By.CSS_SELECTOR, ".BookingGrid-cell.Slot")

    def test_is_visible_requires_displayed_element(
        self, page: SeleniumPage, driver: MagicMock
    ) -> None:
        hidden = MagicMock()
        hidden.is_displayed.return_value = False
        driver.find_elements.return_value = [hidden]

        assert page.is_visible(".Modal-content") is False

        shown = MagicMock()
        shown.is_displayed.return_value = True
        driver.find_elements.return_value = [hidden, shown]

        assert page.is_visible(".Modal-content") is True

    def test_is_visible_stale_element(self, page: SeleniumPage, driver: MagicMock) -> None:
        element = MagicMock()
        element.is_displayed.side_effect = StaleElementReferenceException()
        driver.find_elements.return_value = [element]

        assert page.is_visible("button") is False

    def test_text_of_missing_index(self, page: SeleniumPage, driver: MagicMock) -> None:
        """Test that asking for an element past the end returns None."""
        driver.find_elements.return_value = [MagicMock(text="Next")]

        assert page.text_of("button", 0) == "Next"
        assert page.text_of("button", 3) is None

    def test_attribute_of(self, page: SeleniumPage, driver: MagicMock) -> None:
        element = MagicMock()
        element.get_attribute.return_value = "Button Button--success"
        driver.find_elements.return_value = [element]

        assert page.attribute_of("button", "class") == "Button Button--success"
        element.get_attribute.assert_called_once_with("class")

    def test_click_scrolls_then_clicks_nth(self, page: SeleniumPage, driver: MagicMock) -> None:
        """Test that the indexed element is scrolled into view and clicked via JavaScript."""
        elements = [MagicMock(), MagicMock()]
        driver.find_elements.return_value = elements

        page.click(".BookingGrid-cell.Slot", 1)

        scripts = [call.args for call in driver.execute_script.call_args_list]
        assert scripts[0][1] is elements[1]
        assert "scrollIntoView" in scripts[0][0]
        assert scripts[1] == ("arguments[0].click();", elements[1])

    def test_wait_for_navigation_timeout(self, page: SeleniumPage) -> None:
        with patch("padel_booker.providers.selenium_page.WebDriverWait") as wait_class:
            wait_class.return_value.until.side_effect = TimeoutException()
            assert page.wait_for_navigation("https://club.example.com/", 1.0) is False

    def test_wait_for_navigation_success(self, page: SeleniumPage) -> None:
        with patch("padel_booker.providers.selenium_page.WebDriverWait") as wait_class:
            assert page.wait_for_navigation("https://club.example.com/", 1.0) is True
            wait_class.return_value.until.assert_called_once()

    def test_type_text(self, page: SeleniumPage) -> None:
        """Test that text is typed one character at a time after clearing."""
        element = MagicMock()
        with (
            patch("padel_booker.providers.selenium_page.WebDriverWait") as wait_class,
            patch("padel_booker.providers.selenium_page.time_module.sleep"),
        ):
            wait_class.return_value.until.return_value = element
            page.type_text('form input[type="email"]', "abc")

        element.clear.assert_called_once()
        assert [call.args[0] for call in element.send_keys.call_args_list] == ["a", "b", "c"]

    def test_close_quits_driver(self, page: SeleniumPage, driver: MagicMock) -> None:
        page.close()
        driver.quit.assert_called_once()
