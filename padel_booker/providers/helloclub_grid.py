"""
Availability grid parsing for the Hello Club booking page.

The grid is read from an HTML snapshot of the page rather than element by
element, so parsing is a pure function that can be tested against captured
markup without a browser.
"""

import logging
import re

from bs4 import BeautifulSoup, Tag

from padel_booker.models.schemas import Slot
from padel_booker.providers.base import PageHandle
from padel_booker.providers.helloclub_dom_schema import DOM

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"\b(\d{1,2}):(\d{2})\b")
COURT_NUMBER_PATTERN = re.compile(r"court\s*(\d+)", re.IGNORECASE)


def parse_time_label(text: str) -> str:
    """Return the first HH:MM in the cell text, or the stripped text if none."""
    match = TIME_PATTERN.search(text)
    if not match:
        return text.strip()
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def court_id_from_name(court_name: str) -> str:
    match = COURT_NUMBER_PATTERN.search(court_name)
    if match:
        return match.group(1)
    return court_name.strip() or "unknown"


def _column_index(cell: Tag) -> int:
    parent = cell.parent
    if parent is None:
        return 0
    siblings = parent.find_all(True, recursive=False)
    for index, sibling in enumerate(siblings):
        if sibling is cell:
            return index
    return 0


def _is_available(cell: Tag) -> bool:
    classes = cell.get("class") or []
    return DOM.GRID.available_class in classes and DOM.GRID.disabled_class not in classes


def parse_slots(html: str) -> list[Slot]:
    """
    Extract every grid cell as a Slot, in document order.

    Court identity comes from the column header at the cell's position within
    its row. Returns an empty list when the grid is not rendered.
    """
    soup = BeautifulSoup(html, "html.parser")
    headers = [h.get_text(strip=True) for h in soup.select(DOM.GRID.court_headers)]

    slots = []
    for grid_index, cell in enumerate(soup.select(DOM.GRID.slot_cells)):
        text_el = cell.select_one(DOM.GRID.slot_text)
        raw_text = text_el.get_text(strip=True) if text_el else cell.get_text(strip=True)
        column = _column_index(cell)
        court_name = headers[column] if column < len(headers) else "Unknown"
        slots.append(
            Slot(
                time_label=parse_time_label(raw_text),
                court_id=court_id_from_name(court_name),
                court_name=court_name,
                grid_index=grid_index,
                available=_is_available(cell),
            )
        )
    return slots


def read_availability(page: PageHandle) -> list[Slot]:
    """Available slots currently on the page, in visual grid order."""
    slots = [slot for slot in parse_slots(page.html()) if slot.available]
    logger.debug(f"Read {len(slots)} available slots from grid")
    return slots
