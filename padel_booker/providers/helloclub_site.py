from datetime import date, datetime, timedelta
from urllib.parse import urlparse

import pytz

from padel_booker.exceptions import ElementNotFoundError, LoginError, NavigationError
from padel_booker.providers.base import PageHandle
from padel_booker.providers.helloclub_dom_schema import DOM
from padel_booker.providers.wait_helper import settle, wait_for_element
from padel_booker.services.run_log import RunLog

LOGIN_FORM_TIMEOUT_SECONDS = 15.0
LOGIN_NAVIGATION_TIMEOUT_SECONDS = 15.0
POST_LOGIN_SETTLE_SECONDS = 6.0


class HelloClubSite:
    """
    Login and navigation for a Hello Club booking site.

    Booking grids live at {base_url}/bookings/{sport}/{YYYY-MM-DD}.
    """

    def __init__(self, base_url: str, sport: str, timezone: str = "Europe/London") -> None:
        self.base_url = base_url.rstrip("/")
        self.sport = sport
        self.timezone = timezone

    def target_date(self, days_in_advance: int, today: date | None = None) -> date:
        """The date bookings open for: today in the club's timezone plus the offset."""
        if today is None:
            today = datetime.now(pytz.timezone(self.timezone)).date()
        return today + timedelta(days=days_in_advance)

    def booking_path(self, target_date: date) -> str:
        return f"/bookings/{self.sport}/{target_date.isoformat()}"

    def booking_url(self, target_date: date) -> str:
        return f"{self.base_url}{self.booking_path(target_date)}"

    def login(self, page: PageHandle, email: str, password: str, log: RunLog) -> None:
        """Fill and submit the login form, then wait for the session to settle."""
        if not email or not password:
            raise LoginError("Hello Club credentials not configured")

        log.info(f"Navigating to {self.base_url}...")
        page.goto(self.base_url)

        if not wait_for_element(page, DOM.LOGIN.form, LOGIN_FORM_TIMEOUT_SECONDS):
            raise ElementNotFoundError(DOM.LOGIN.form, LOGIN_FORM_TIMEOUT_SECONDS, "Login form")
        if page.count(DOM.LOGIN.email_input) == 0:
            raise LoginError("Could not find email input field in the form")

        log.info("Email input found, entering credentials...")
        page.type_text(DOM.LOGIN.email_input, email)
        page.type_text(DOM.LOGIN.password_input, password)

        if not wait_for_element(page, DOM.LOGIN.submit_button, LOGIN_FORM_TIMEOUT_SECONDS):
            raise ElementNotFoundError(
                DOM.LOGIN.submit_button, LOGIN_FORM_TIMEOUT_SECONDS, "Login button"
            )
        url_before = page.current_url()
        page.click(DOM.LOGIN.submit_button)

        if page.wait_for_navigation(url_before, LOGIN_NAVIGATION_TIMEOUT_SECONDS):
            log.info(f"Login navigation complete: {page.current_url()}")
            return

        # The site sometimes finishes login behind a spinner without navigating
        log.info("No navigation after login, refreshing page to complete login")
        settle(POST_LOGIN_SETTLE_SECONDS)
        page.reload()

    def navigate_to_grid(
        self,
        page: PageHandle,
        target_date: date,
        log: RunLog,
        grid_timeout: float = 30.0,
        settle_seconds: float = 3.0,
    ) -> None:
        """Open the booking grid for a date and wait until its cells render."""
        url = self.booking_url(target_date)
        log.info(f"Navigating to {self.sport} bookings for {target_date.isoformat()}")
        page.goto(url)

        expected_path = self.booking_path(target_date)
        actual_path = urlparse(page.current_url()).path.rstrip("/")
        if actual_path != expected_path:
            raise NavigationError(
                f"Expected booking page {expected_path} but landed on {page.current_url()}"
            )

        log.info("Waiting for slots to appear...")
        if not wait_for_element(page, DOM.GRID.slot_cells, grid_timeout):
            raise ElementNotFoundError(DOM.GRID.slot_cells, grid_timeout, "Booking grid")
        settle(settle_seconds)
