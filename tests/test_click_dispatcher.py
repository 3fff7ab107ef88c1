"""
Tests for dispatch_click in padel_booker/providers/click_dispatcher.py.
"""

from unittest.mock import patch

import pytest

from padel_booker.models.schemas import BookingPreferences
from padel_booker.providers.click_dispatcher import SECOND_CLICK_SETTLE_SECONDS, dispatch_click
from padel_booker.providers.helloclub_grid import read_availability
from padel_booker.services.run_log import RunLog
from tests.fixtures.fake_site import FakeHelloClubPage, build_cells


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("padel_booker.providers.wait_helper.time_module.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def preferences() -> BookingPreferences:
    return BookingPreferences(priority_times=("12:00",), preferred_court_id="1")


def make_page(**kwargs) -> FakeHelloClubPage:
    page = FakeHelloClubPage(cells=build_cells({"12:00": [1, 2]}, ["12:00"]), **kwargs)
    page.url = "https://club.example.com/bookings/padel/2026-11-02"
    return page


class TestDispatchClick:
    """Tests for the single and double click paths."""

    def test_single_click_when_modal_opens(
        self, preferences: BookingPreferences, no_sleep
    ) -> None:
        """Test that one click suffices when the modal's button appears."""
        page = make_page()
        slot = read_availability(page)[0]

        result = dispatch_click(page, slot, preferences, RunLog())

        assert result.success is True
        assert result.required_second_click is False
        assert result.time_booked == "12:00"
        assert result.court_booked == "Court 1"
        assert result.was_preferred_court is True
        assert page.cell_clicks == [("12:00", "1")]
        no_sleep.assert_called_once_with(SECOND_CLICK_SETTLE_SECONDS)

    def test_second_click_when_first_only_selects(self, preferences: BookingPreferences) -> None:
        """Test that the cell is clicked again if the first click did not open the modal."""
        page = make_page(first_click_opens_modal=False)
        slot = read_availability(page)[1]

        result = dispatch_click(page, slot, preferences, RunLog())

        assert result.required_second_click is True
        assert result.was_preferred_court is False
        assert page.cell_clicks == [("12:00", "2"), ("12:00", "2")]
        assert page.modal_cell is not None

    def test_marks_slot_attempted(self, preferences: BookingPreferences) -> None:
        """Test that the slot is marked attempted whatever the click outcome."""
        page = make_page(modal_without_button=True)
        slot = read_availability(page)[0]

        dispatch_click(page, slot, preferences, RunLog())

        assert slot.attempted is True

    def test_custom_settle_interval(self, preferences: BookingPreferences, no_sleep) -> None:
        """Test that the settle interval can be configured."""
        page = make_page()
        slot = read_availability(page)[0]

        dispatch_click(page, slot, preferences, RunLog(), settle_seconds=1.0)

        no_sleep.assert_called_once_with(1.0)

    def test_logs_second_click(self, preferences: BookingPreferences) -> None:
        """Test that the second click is recorded in the run log."""
        page = make_page(first_click_opens_modal=False)
        log = RunLog()

        dispatch_click(page, read_availability(page)[0], preferences, log)

        assert any("clicking again" in line for line in log.lines)
