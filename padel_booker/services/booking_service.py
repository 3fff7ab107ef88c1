"""
Booking service for padel court reservations.

This module holds the business logic of a booking run:
1. Provisioning a browser session (optionally with a saved profile)
2. Logging in to the club site unless the profile is already signed in
3. Opening the availability grid for the target date
4. Running the attempt loop: pick a slot, open it, push it through the
   booking modal, and retry with the next-best slot on conflicts
5. Releasing the session on every exit path and returning the log trail
"""

import asyncio
import logging
import uuid
from datetime import date

from padel_booker.config import Settings, settings
from padel_booker.exceptions import BookingError, ReleaseSubjectError
from padel_booker.models.schemas import (
    AttemptOutcome,
    BookingPreferences,
    BookingRunResult,
    OutcomeKind,
    ProfileResult,
    Slot,
    is_weekend,
)
from padel_booker.providers.base import BrowserSession, PageHandle, SessionProvisioner
from padel_booker.providers.click_dispatcher import dispatch_click
from padel_booker.providers.confirmation_flow import ConfirmationFlow, FlowState
from padel_booker.providers.helloclub_grid import read_availability
from padel_booker.providers.helloclub_site import HelloClubSite
from padel_booker.providers.session_provisioner import get_provisioner
from padel_booker.providers.wait_helper import settle
from padel_booker.services.release_parser import parse_release_subject
from padel_booker.services.run_log import RunLog
from padel_booker.services.slot_selector import select_slot

logger = logging.getLogger(__name__)

AFTER_CLICK_SETTLE_SECONDS = 2.0
AFTER_SECOND_CLICK_SETTLE_SECONDS = 3.0


class BookingService:
    """
    Runs padel court bookings against the club site.

    Attributes:
        config: Settings the run defaults come from.
        site: Login and navigation for the club site.
        _provisioner: Creates browser sessions; built from config on first use
            unless one is injected.
    """

    def __init__(
        self,
        config: Settings | None = None,
        provisioner: SessionProvisioner | None = None,
        site: HelloClubSite | None = None,
    ) -> None:
        self.config = config or settings
        self._provisioner = provisioner
        self.site = site or HelloClubSite(
            self.config.base_url, self.config.sport, self.config.timezone
        )

    @property
    def provisioner(self) -> SessionProvisioner:
        if self._provisioner is None:
            self._provisioner = get_provisioner(self.config)
        return self._provisioner

    def attempt_booking(
        self,
        page: PageHandle,
        preferences: BookingPreferences,
        target_date: date,
        log: RunLog,
        debug_mode: bool = False,
    ) -> AttemptOutcome:
        """
        Select, open and confirm slots until one books or attempts run out.

        Availability is re-read before every attempt since a competing booking
        may have changed the grid. Slots already tried in this run are never
        picked again.
        """
        max_attempts = self.config.max_booking_attempts
        date_str = target_date.isoformat()
        tried: set[tuple[str, str]] = set()
        last_slot: Slot | None = None

        for attempt in range(1, max_attempts + 1):
            log.info(f"Booking attempt {attempt} of {max_attempts}")
            try:
                slots = read_availability(page)
                for slot in slots:
                    if slot.key in tried:
                        slot.attempted = True

                chosen = select_slot(slots, preferences)
                if chosen is None:
                    log.info("No untried slots left at preferred times")
                    return AttemptOutcome(
                        kind=OutcomeKind.EXHAUSTED,
                        date=date_str,
                        time=last_slot.time_label if last_slot else None,
                        error="No available slots found at preferred times",
                        attempts=attempt - 1,
                    )

                last_slot = chosen
                click = dispatch_click(
                    page,
                    chosen,
                    preferences,
                    log,
                    settle_seconds=self.config.second_click_settle_seconds,
                )
                tried.add(chosen.key)
                if click.required_second_click:
                    log.info("Required second click due to no modal visible after first click")
                settle(
                    AFTER_SECOND_CLICK_SETTLE_SECONDS
                    if click.required_second_click
                    else AFTER_CLICK_SETTLE_SECONDS
                )

                flow = ConfirmationFlow(
                    page,
                    log,
                    debug_mode=debug_mode,
                    button_timeout=self.config.button_timeout_seconds,
                    poll_interval=self.config.modal_poll_interval_seconds,
                    poll_attempts=self.config.modal_poll_attempts,
                )
                result = flow.run()
            except Exception as e:
                log.error(f"Booking attempt {attempt} failed: {e}")
                return AttemptOutcome(
                    kind=OutcomeKind.FATAL,
                    date=date_str,
                    time=last_slot.time_label if last_slot else None,
                    court=last_slot.court_name if last_slot else None,
                    error=str(e),
                    attempts=attempt,
                )

            if result.state is FlowState.CONFLICT:
                log.info(
                    f"Booking attempt {attempt} failed due to slot being already booked, "
                    "trying next available slot..."
                )
                continue

            log.info(f"Booked {chosen.time_label} on {click.court_booked} for {date_str}")
            return AttemptOutcome(
                kind=OutcomeKind.BOOKED,
                date=date_str,
                time=chosen.time_label,
                court=click.court_booked,
                attempts=attempt,
                simulated=result.state is FlowState.SIMULATED,
            )

        log.info(f"All {max_attempts} booking attempts ended in conflicts")
        return AttemptOutcome(
            kind=OutcomeKind.EXHAUSTED,
            date=date_str,
            time=last_slot.time_label if last_slot else None,
            error=f"All {max_attempts} booking attempts hit already-booked slots",
            attempts=max_attempts,
        )

    def run_booking(
        self,
        target_date: date | None = None,
        priority_times: list[str] | None = None,
        debug_mode: bool | None = None,
        preferred_court: str | None = None,
        profile_id: str | None = None,
        account: str | None = None,
    ) -> BookingRunResult:
        """
        Run one full booking: session, login, grid, attempt loop, cleanup.

        Never raises; every failure is reported in the returned result with the
        run's log lines.
        """
        log = RunLog(label=account)
        debug = self.config.debug_mode if debug_mode is None else debug_mode
        court = preferred_court or self.config.preferred_court
        profile = profile_id or self.config.profile_for(account)

        log.info("Starting session")
        log.info(f"Debug mode: {debug}")
        log.info(f"Preferred court: {court}")
        log.info(f"Profile ID: {profile}")
        if debug:
            log.info("Running in DEBUG MODE - No actual bookings will be made")

        if target_date is None:
            target_date = self.site.target_date(self.config.days_in_advance)
        if priority_times is not None:
            preferences = BookingPreferences(
                priority_times=tuple(priority_times), preferred_court_id=court
            )
        else:
            preferences = BookingPreferences.for_date(
                target_date, self.config.weekday_times, self.config.weekend_times, court
            )
        log.info(
            f"Booking for {target_date.isoformat()} "
            f"({'weekend' if is_weekend(target_date) else 'weekday'}), "
            f"priority times: {', '.join(preferences.priority_times)}"
        )

        if self.config.start_delay_seconds > 0:
            log.info(f"Using {self.config.start_delay_seconds:g}-second delay before starting...")
            settle(self.config.start_delay_seconds)
            log.info("Delay completed, proceeding with booking...")

        session: BrowserSession | None = None
        try:
            session = self.provisioner.create(profile)
            log.info(f"Session created: {session.id}")
            if session.live_url:
                log.info(f"Live URL: {session.live_url}")
            outcome = self._book_in_session(
                session, target_date, preferences, log, debug, profile, account
            )
        except Exception as e:
            log.error(f"Encountered an error: {e}")
            outcome = AttemptOutcome(
                kind=OutcomeKind.FATAL, date=target_date.isoformat(), error=str(e)
            )
        finally:
            if session is not None:
                self._release(session, log)

        return self._to_result(outcome, log)

    def _book_in_session(
        self,
        session: BrowserSession,
        target_date: date,
        preferences: BookingPreferences,
        log: RunLog,
        debug: bool,
        profile: str | None,
        account: str | None,
    ) -> AttemptOutcome:
        page = session.page
        if profile:
            log.info("Using profile, skipping login")
        else:
            email, password = self.config.credentials_for(account)
            self.site.login(page, email, password, log)

        self.site.navigate_to_grid(
            page,
            target_date,
            log,
            grid_timeout=self.config.grid_timeout_seconds,
            settle_seconds=self.config.grid_settle_seconds,
        )

        available = read_availability(page)
        log.info(f"Available slots ({len(available)}):")
        for slot in available:
            log.info(f"- Time: {slot.time_label}, Court: {slot.court_name} ({slot.court_id})")
        if not available:
            raise BookingError("No available slots found for this day")

        return self.attempt_booking(page, preferences, target_date, log, debug_mode=debug)

    def _release(self, session: BrowserSession, log: RunLog) -> None:
        try:
            self.provisioner.stop(session)
            log.info(f"Session {session.id} stopped")
        except Exception as e:
            log.warning(f"Failed to stop session {session.id}: {e}")

    @staticmethod
    def _to_result(outcome: AttemptOutcome, log: RunLog) -> BookingRunResult:
        success = outcome.kind is OutcomeKind.BOOKED
        if success:
            log.info("Booking completed successfully")
        return BookingRunResult(
            success=success,
            time_booked=outcome.time,
            court_booked=outcome.court if success else None,
            date=outcome.date,
            error=None if success else outcome.error,
            debug=outcome.simulated,
            outcome=outcome.kind,
            logs=log.snapshot(),
        )

    def run_release_booking(
        self,
        subject: str,
        debug_mode: bool | None = None,
        profile_id: str | None = None,
        today: date | None = None,
    ) -> BookingRunResult:
        """Book the exact slot announced in a court-release email subject."""
        if today is None:
            today = self.site.target_date(0)
        try:
            notice = parse_release_subject(subject, today=today)
        except ReleaseSubjectError as e:
            log = RunLog()
            log.info(f"Attempting to parse email subject: '{subject}'")
            log.error(str(e))
            return BookingRunResult(success=False, error=str(e), logs=log.snapshot())

        logger.info(
            f"Target booking: {notice.day} {notice.original_date} at {notice.time}"
        )
        return self.run_booking(
            target_date=notice.target_date,
            priority_times=[notice.time],
            debug_mode=debug_mode,
            profile_id=profile_id,
        )

    def create_profile(self, account: str | None = None) -> ProfileResult:
        """
        Create a persistent browser profile and sign it in once.

        Later runs that pass the returned profile_id skip the login form.
        """
        log = RunLog(label=(account or "default").upper())
        profile_id = f"{account or 'default'}-{uuid.uuid4().hex[:8]}"
        email, password = self.config.credentials_for(account)
        session: BrowserSession | None = None
        try:
            session = self.provisioner.create(profile_id)
            log.info(f"Profile created: {profile_id}")
            log.info(f"Session created: {session.id}")
            self.site.login(session.page, email, password, log)
            log.info("Login successful")
            result = ProfileResult(
                success=True,
                account=account,
                profile_id=profile_id,
                session_id=session.id,
                live_url=session.live_url,
            )
        except Exception as e:
            log.error(f"Encountered an error: {e}")
            result = ProfileResult(success=False, account=account, error=str(e))
        finally:
            if session is not None:
                self._release(session, log)

        result.logs = log.snapshot()
        return result

    async def run_booking_async(self, **kwargs) -> BookingRunResult:
        """Run a booking in a worker thread; Selenium calls are blocking."""
        return await asyncio.to_thread(self.run_booking, **kwargs)

    async def run_for_accounts(
        self, accounts: list[str | None], **kwargs
    ) -> list[BookingRunResult]:
        """
        Run independent bookings, one session each, concurrently.

        Each account uses its own PROFILE_ID_<SUFFIX>. Passing one profile_id for
        several accounts raises ValueError.
        """
        if kwargs.get("profile_id") and len(accounts) > 1:
            raise ValueError("profile_id cannot be shared by several accounts")
        return await asyncio.gather(
            *(self.run_booking_async(account=account, **kwargs) for account in accounts)
        )


booking_service = BookingService()
