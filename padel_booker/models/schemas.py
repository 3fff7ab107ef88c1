from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Slot(BaseModel):
    time_label: str = Field(..., description="Start time shown in the grid cell, e.g. 14:00")
    court_id: str
    court_name: str = ""
    grid_index: int = Field(..., ge=0, description="Position among all grid cells")
    available: bool = False
    attempted: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return self.time_label, self.court_id


class BookingPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority_times: tuple[str, ...]
    preferred_court_id: str = "1"

    @classmethod
    def for_date(
        cls,
        target_date: date,
        weekday_times: list[str],
        weekend_times: list[str],
        preferred_court_id: str,
    ) -> "BookingPreferences":
        """Pick the weekend or weekday time list for the target date."""
        times = weekend_times if is_weekend(target_date) else weekday_times
        return cls(priority_times=tuple(times), preferred_court_id=preferred_court_id)


def is_weekend(target_date: date) -> bool:
    return target_date.weekday() >= 5


class ClickResult(BaseModel):
    success: bool
    time_booked: str | None = None
    court_booked: str | None = None
    was_preferred_court: bool = False
    required_second_click: bool = False


class ModalState(BaseModel):
    has_modal: bool = False
    has_next_button: bool = False
    button_label: str = ""
    is_already_booked: bool = False
    is_success: bool = False
    raw_text: str = ""


class OutcomeKind(str, Enum):
    BOOKED = "booked"
    CONFLICT = "conflict"
    EXHAUSTED = "exhausted"
    FATAL = "fatal"


class AttemptOutcome(BaseModel):
    kind: OutcomeKind
    time: str | None = None
    court: str | None = None
    date: str | None = None
    error: str | None = None
    attempts: int = 0
    simulated: bool = False


class BookingRunResult(BaseModel):
    success: bool
    time_booked: str | None = None
    court_booked: str | None = None
    date: str | None = None
    error: str | None = None
    debug: bool = False
    outcome: OutcomeKind | None = None
    logs: list[str] = Field(default_factory=list)


class ReleaseNotice(BaseModel):
    day: str
    target_date: date
    time: str
    original_date: str


class ProfileResult(BaseModel):
    success: bool
    account: str | None = None
    profile_id: str | None = None
    session_id: str | None = None
    live_url: str | None = None
    error: str | None = None
    logs: list[str] = Field(default_factory=list)
