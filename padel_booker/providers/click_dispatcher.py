from padel_booker.models.schemas import BookingPreferences, ClickResult, Slot
from padel_booker.providers.base import PageHandle
from padel_booker.providers.helloclub_dom_schema import DOM
from padel_booker.providers.wait_helper import settle
from padel_booker.services.run_log import RunLog

SECOND_CLICK_SETTLE_SECONDS = 2.5


def dispatch_click(
    page: PageHandle,
    slot: Slot,
    preferences: BookingPreferences,
    log: RunLog,
    settle_seconds: float = SECOND_CLICK_SETTLE_SECONDS,
) -> ClickResult:
    """
    Click a grid cell to open its booking modal.

    On some renders the first click only highlights the cell. If the modal's
    primary button is not visible after settle_seconds, the cell is clicked a
    second time. The slot is marked attempted before any click, whatever
    happens next.
    """
    slot.attempted = True
    is_preferred = slot.court_id == preferences.preferred_court_id

    page.click(DOM.GRID.slot_cells, slot.grid_index)
    log.info(
        f"Clicked {slot.time_label} slot on {slot.court_name or slot.court_id} "
        f"({'preferred' if is_preferred else 'alternative'} court)"
    )

    settle(settle_seconds)
    modal_visible = page.is_visible(DOM.MODAL.primary_button)
    if not modal_visible:
        log.info("Modal not visible after first click, clicking again")
        page.click(DOM.GRID.slot_cells, slot.grid_index)

    return ClickResult(
        success=True,
        time_booked=slot.time_label,
        court_booked=slot.court_name or slot.court_id,
        was_preferred_court=is_preferred,
        required_second_click=not modal_visible,
    )
