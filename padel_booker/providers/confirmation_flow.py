"""
Booking modal state machine.

After a grid cell is clicked the site shows a three-step modal. The primary
button keeps the same classes on every step, so each step is identified by the
label it must carry when clicked:

    ADVANCE_A  "Next"
    ADVANCE_B  "Next"
    CONFIRM    "Confirm booking"

After each advance step the modal is polled until either the "already booked"
marker appears (another member took the court first) or the button for the
following step is shown. A conflict is cancelled out of and reported to the
caller, which decides whether to retry with another slot.
"""

from dataclasses import dataclass
from enum import Enum

from bs4 import BeautifulSoup

from padel_booker.exceptions import (
    ButtonNotFoundError,
    ClickRejectedError,
    ElementNotFoundError,
)
from padel_booker.models.schemas import ModalState
from padel_booker.providers.base import PageHandle
from padel_booker.providers.helloclub_dom_schema import DOM
from padel_booker.providers.wait_helper import poll_until, wait_for_element
from padel_booker.services.run_log import RunLog

BUTTON_TIMEOUT_SECONDS = 5.0
MODAL_POLL_INTERVAL_SECONDS = 0.5
MODAL_POLL_ATTEMPTS = 20


class ConfirmationStep(str, Enum):
    ADVANCE_A = "advance_a"
    ADVANCE_B = "advance_b"
    CONFIRM = "confirm"


STEP_LABELS: dict[ConfirmationStep, str] = {
    ConfirmationStep.ADVANCE_A: "Next",
    ConfirmationStep.ADVANCE_B: "Next",
    ConfirmationStep.CONFIRM: "Confirm booking",
}

STEP_SEQUENCE: tuple[ConfirmationStep, ...] = (
    ConfirmationStep.ADVANCE_A,
    ConfirmationStep.ADVANCE_B,
    ConfirmationStep.CONFIRM,
)


def next_step(step: ConfirmationStep) -> ConfirmationStep | None:
    position = STEP_SEQUENCE.index(step)
    if position + 1 < len(STEP_SEQUENCE):
        return STEP_SEQUENCE[position + 1]
    return None


class FlowState(str, Enum):
    CONFIRMED = "confirmed"
    CONFLICT = "conflict"
    SIMULATED = "simulated"


@dataclass
class FlowResult:
    state: FlowState
    step: ConfirmationStep
    modal_state: ModalState | None = None
    verified: bool = True


def parse_modal_state(html: str) -> ModalState:
    """Read the booking modal's state from a page snapshot."""
    soup = BeautifulSoup(html, "html.parser")
    content = soup.select_one(DOM.MODAL.modal_content)
    button = soup.select_one(DOM.MODAL.primary_button)
    text = content.get_text(" ", strip=True) if content else ""
    lowered = text.lower()
    return ModalState(
        has_modal=content is not None or button is not None,
        has_next_button=button is not None,
        button_label=button.get_text(strip=True) if button else "",
        is_already_booked=DOM.MODAL.already_booked_text in text,
        is_success=any(marker.lower() in lowered for marker in DOM.MODAL.success_texts),
        raw_text=text,
    )


def find_cancel_button_index(html: str) -> int | None:
    soup = BeautifulSoup(html, "html.parser")
    for index, button in enumerate(soup.select(DOM.MODAL.buttons)):
        if button.get_text(strip=True).lower() == DOM.MODAL.cancel_label:
            return index
    return None


class ConfirmationFlow:
    """Drives one slot through the booking modal.

    run() ends in CONFIRMED, CONFLICT or (in debug mode) SIMULATED. Missing
    buttons and label mismatches raise BookingError subclasses.
    """

    def __init__(
        self,
        page: PageHandle,
        log: RunLog,
        debug_mode: bool = False,
        button_timeout: float = BUTTON_TIMEOUT_SECONDS,
        poll_interval: float = MODAL_POLL_INTERVAL_SECONDS,
        poll_attempts: int = MODAL_POLL_ATTEMPTS,
    ) -> None:
        self.page = page
        self.log = log
        self.debug_mode = debug_mode
        self.button_timeout = button_timeout
        self.poll_interval = poll_interval
        self.poll_attempts = poll_attempts

    def read_modal_state(self) -> ModalState:
        return parse_modal_state(self.page.html())

    def run(self) -> FlowResult:
        for step in STEP_SEQUENCE:
            self._await_button(step)

            if step is ConfirmationStep.CONFIRM and self.debug_mode:
                self.log.info(
                    "DEBUG MODE: Skipping final confirmation click - booking would have been confirmed"
                )
                return FlowResult(state=FlowState.SIMULATED, step=step)

            url_before = self.page.current_url()
            self._click_button(step)

            if step is ConfirmationStep.CONFIRM:
                return self._await_confirmation(url_before)

            modal_state = self._await_modal_update(step)
            if modal_state.is_already_booked:
                self.log.info(
                    "Detected slot is already booked, cancelling to retry with another slot"
                )
                self._cancel()
                return FlowResult(state=FlowState.CONFLICT, step=step, modal_state=modal_state)

        raise AssertionError("confirmation sequence ended without a confirm step")

    def _await_button(self, step: ConfirmationStep) -> None:
        label = STEP_LABELS[step]
        self.log.info(f"Waiting for {label} button...")
        if not wait_for_element(self.page, DOM.MODAL.primary_button, self.button_timeout):
            self.log.error(f"{label} button not found after waiting")
            raise ButtonNotFoundError(label, DOM.MODAL.primary_button, self.button_timeout)

    def _click_button(self, step: ConfirmationStep) -> None:
        label = STEP_LABELS[step]
        text = self.page.text_of(DOM.MODAL.primary_button)
        if text is None or label not in text.strip():
            self.log.error(f"Failed to click {label} button: button shows '{text or ''}'")
            raise ClickRejectedError(label, text)

        class_name = self.page.attribute_of(DOM.MODAL.primary_button, "class") or "no-class"
        self.page.click(DOM.MODAL.primary_button)
        self.log.info(f"Clicked {label} button: {class_name}")

    def _await_modal_update(self, step: ConfirmationStep) -> ModalState:
        following = next_step(step)
        expected_label = STEP_LABELS[following] if following else ""

        result = poll_until(
            self.read_modal_state,
            lambda s: s.is_already_booked
            or (s.has_next_button and expected_label in s.button_label),
            self.poll_interval,
            self.poll_attempts,
        )
        state = result.value
        self.log.info(
            f"Modal state after {STEP_LABELS[step]}: booked_conflict={state.is_already_booked}, "
            f"button='{state.button_label}', attempts={result.attempts}"
        )

        if result.matched or state.is_already_booked:
            return state

        # No definitive signal within budget: carry on if a primary button is
        # still showing; its label is checked again at click time.
        if self.page.is_visible(DOM.MODAL.primary_button):
            self.log.warning("Modal state uncertain but primary button visible, continuing")
            return state

        raise ElementNotFoundError(
            DOM.MODAL.primary_button,
            self.poll_interval * self.poll_attempts,
            description=f"{expected_label or 'Next'} step of booking modal",
        )

    def _cancel(self) -> None:
        index = find_cancel_button_index(self.page.html())
        if index is None:
            self.log.warning("No Cancel button found in booking modal")
            return

        self.page.click(DOM.MODAL.buttons, index)
        result = poll_until(
            self.read_modal_state,
            lambda s: not s.has_modal,
            self.poll_interval,
            self.poll_attempts,
        )
        if result.matched:
            self.log.info("Booking modal closed after Cancel")
        else:
            self.log.warning("Booking modal still open after Cancel, continuing anyway")

    def _await_confirmation(self, url_before: str) -> FlowResult:
        self.log.info("Waiting for booking completion...")

        def read_state() -> tuple[ModalState, str]:
            return self.read_modal_state(), self.page.current_url()

        def finished(observed: tuple[ModalState, str]) -> bool:
            state, url = observed
            return (
                state.is_already_booked
                or state.is_success
                or not state.has_modal
                or url != url_before
            )

        result = poll_until(read_state, finished, self.poll_interval, self.poll_attempts)
        state, url = result.value

        if state.is_already_booked:
            self.log.info("Court was taken before the booking could be confirmed")
            self._cancel()
            return FlowResult(
                state=FlowState.CONFLICT, step=ConfirmationStep.CONFIRM, modal_state=state
            )

        if not result.matched:
            self.log.warning(
                "No success indicator after Confirm booking; treating the booking as placed"
            )
        else:
            self.log.info(f"Final state - URL: {url}, success message: {state.is_success}")

        return FlowResult(
            state=FlowState.CONFIRMED,
            step=ConfirmationStep.CONFIRM,
            modal_state=state,
            verified=result.matched,
        )
