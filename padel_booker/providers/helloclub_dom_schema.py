"""
Centralized DOM schema for the Hello Club booking site.

All CSS selectors and marker texts used by the booking flow are defined here as
named constants, grouped by functional area. When the club site changes its
markup, update selectors ONLY in this file.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoginSelectors:
    """Selectors for the email/password login form on the club home page."""

    form: str = "form"
    email_input: str = 'form input[type="email"]'
    password_input: str = 'form input[type="password"]'
    submit_button: str = "button.firstActionButton"


@dataclass(frozen=True)
class BookingGridSelectors:
    """Selectors for the availability grid on /bookings/<sport>/<date>."""

    # Every cell in the grid, booked or not. Cell position in this list is the
    # location reference used to click a slot.
    slot_cells: str = ".BookingGrid-cell.Slot"
    # Slot time text inside a cell
    slot_text: str = ".Slot-text"
    # Court name headers, one per grid column
    court_headers: str = ".BookingGridArea-name"
    # Class marking a cell as bookable
    available_class: str = "available"
    # Class marking a cell as not clickable even when otherwise available
    disabled_class: str = "disabled"


@dataclass(frozen=True)
class ConfirmationModalSelectors:
    """Selectors for the multi-step booking modal.

    The primary action button keeps the same classes on every step ("Next",
    "Next", "Confirm booking"), so steps are told apart by its label only.
    """

    modal_content: str = ".Modal-content"
    primary_button: str = "button.Button.Button--success.ng-animate-disabled"
    buttons: str = "button"
    cancel_label: str = "cancel"
    already_booked_text: str = "This court already has a booking or event at this time"
    success_texts: tuple[str, ...] = (
        "Booking confirmed",
        "Booking successful",
        "successful",
        "confirmed",
    )


@dataclass(frozen=True)
class HelloClubDOMSchema:
    """Top-level container grouping all selector categories."""

    LOGIN: LoginSelectors = LoginSelectors()
    GRID: BookingGridSelectors = BookingGridSelectors()
    MODAL: ConfirmationModalSelectors = ConfirmationModalSelectors()


# Single import point: `from padel_booker.providers.helloclub_dom_schema import DOM`
DOM = HelloClubDOMSchema()
