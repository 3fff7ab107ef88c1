"""
Tests for login and grid navigation in padel_booker/providers/helloclub_site.py.
"""

from datetime import date
from unittest.mock import patch

import pytest

from padel_booker.exceptions import ElementNotFoundError, LoginError, NavigationError
from padel_booker.providers.helloclub_site import HelloClubSite
from padel_booker.services.run_log import RunLog
from tests.fixtures.fake_site import BASE_URL, FakeHelloClubPage, build_cells


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("padel_booker.providers.wait_helper.time_module.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def site() -> HelloClubSite:
    return HelloClubSite(BASE_URL + "/", "padel")


class TestDatesAndUrls:
    """Tests for target dates and booking URLs."""

    def test_target_date_offset(self, site: HelloClubSite) -> None:
        assert site.target_date(14, today=date(2026, 10, 19)) == date(2026, 11, 2)

    def test_target_date_uses_club_timezone(self, site: HelloClubSite) -> None:
        """Test that without an explicit today the club's local date is used."""
        result = site.target_date(0)
        assert isinstance(result, date)

    def test_booking_url(self, site: HelloClubSite) -> None:
        """Test that a trailing slash on the base URL is dropped."""
        assert site.booking_url(date(2026, 11, 2)) == f"{BASE_URL}/bookings/padel/2026-11-02"


class TestLogin:
    """Tests for HelloClubSite.login."""

    def test_fills_and_submits_form(self, site: HelloClubSite) -> None:
        page = FakeHelloClubPage()
        log = RunLog()

        site.login(page, "member@example.com", "secret", log)

        assert page.typed == {
            'form input[type="email"]': "member@example.com",
            'form input[type="password"]': "secret",
        }
        assert page.logged_in is True
        assert any("Login navigation complete" in line for line in log.lines)

    def test_no_navigation_refreshes(self, site: HelloClubSite, no_sleep) -> None:
        """Test that a login without navigation waits and reloads the page."""
        page = FakeHelloClubPage()
        page.wait_for_navigation = lambda previous_url, timeout: False
        log = RunLog()

        site.login(page, "member@example.com", "secret", log)

        no_sleep.assert_any_call(6.0)
        assert any("refreshing page" in line for line in log.lines)

    def test_missing_credentials(self, site: HelloClubSite) -> None:
        with pytest.raises(LoginError):
            site.login(FakeHelloClubPage(), "", "secret", RunLog())

    def test_missing_login_form(self, site: HelloClubSite) -> None:
        """Test that an already signed-in page without a form is an error."""
        page = FakeHelloClubPage(logged_in=True)

        with pytest.raises(ElementNotFoundError, match="Login form not found"):
            site.login(page, "member@example.com", "secret", RunLog())


class TestNavigateToGrid:
    """Tests for HelloClubSite.navigate_to_grid."""

    def test_opens_grid(self, site: HelloClubSite, no_sleep) -> None:
        page = FakeHelloClubPage(cells=build_cells({"12:00": [1]}, ["12:00"]), logged_in=True)

        site.navigate_to_grid(page, date(2026, 11, 2), RunLog(), grid_timeout=1, settle_seconds=2)

        assert page.current_url() == f"{BASE_URL}/bookings/padel/2026-11-02"
        no_sleep.assert_called_with(2)

    def test_redirect_is_navigation_error(self, site: HelloClubSite) -> None:
        page = FakeHelloClubPage(cells=build_cells({"12:00": [1]}, ["12:00"]))

        def redirect(url: str) -> None:
            page.url = f"{BASE_URL}/login?next=/bookings"

        page.goto = redirect

        with pytest.raises(NavigationError, match="landed on"):
            site.navigate_to_grid(page, date(2026, 11, 2), RunLog())

    def test_empty_grid_times_out(self, site: HelloClubSite) -> None:
        """Test that a grid that never renders cells raises ElementNotFoundError."""
        page = FakeHelloClubPage(cells=[])

        with pytest.raises(ElementNotFoundError, match="Booking grid not found"):
            site.navigate_to_grid(page, date(2026, 11, 2), RunLog(), grid_timeout=0.3)
