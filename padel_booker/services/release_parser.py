"""
Parsing of "court released" notification emails.

The club emails members when a booked court is given back, with a subject like
"Padel court available for Saturday 26 April at 19:00". The subject carries
everything needed to book that exact slot.
"""

import logging
import re
from datetime import date, datetime

from padel_booker.exceptions import ReleaseSubjectError
from padel_booker.models.schemas import ReleaseNotice

logger = logging.getLogger(__name__)

RELEASE_MARKER = "padel court available"
SUBJECT_PATTERN = re.compile(
    r"court available for (\w+) (\d{1,2})(?:st|nd|rd|th)? (\w+) at (\d{1,2}):(\d{2})",
    re.IGNORECASE,
)


def _parse_day_month(day_number: str, month: str, year: int) -> date:
    for fmt in ("%d %B %Y", "%d %b %Y"):
        try:
            return datetime.strptime(f"{day_number} {month} {year}", fmt).date()
        except ValueError:
            continue
    raise ReleaseSubjectError(f"Invalid date in email subject: {day_number} {month}")


def parse_release_subject(subject: str, today: date | None = None) -> ReleaseNotice:
    """
    Parse a court-release email subject.

    The year is not in the subject; a date that would already be in the past
    is taken to mean next year.

    Raises:
        ReleaseSubjectError: if the subject is not a release email or cannot be parsed
    """
    if today is None:
        today = date.today()

    if RELEASE_MARKER not in subject.lower():
        raise ReleaseSubjectError("Not a Padel court release email")

    match = SUBJECT_PATTERN.search(subject)
    if not match:
        raise ReleaseSubjectError(
            "Could not parse email subject format. "
            "Expected e.g. 'Padel court available for Saturday 26 April at 19:00'"
        )

    day, day_number, month, hour, minute = match.groups()
    target = _parse_day_month(day_number, month, today.year)
    if target < today:
        target = _parse_day_month(day_number, month, today.year + 1)

    notice = ReleaseNotice(
        day=day,
        target_date=target,
        time=f"{int(hour):02d}:{minute}",
        original_date=f"{day_number} {month}",
    )
    logger.info(f"Parsed release notice: {notice.model_dump_json()}")
    return notice
