"""
Multi-Date Booking Workflow

Logs in once, then for every eligible weekday in the date range:
- queries desks for that day's work-hour window
- ranks the available ones by floor and amenity preference
- books the top desk

A failure on one date never stops the remaining dates.
"""

import logging
import time
from enum import Enum
from typing import List, Optional

from config import Config
from deskbot.exceptions import AuthError, NoDesksAvailable, QueryError, ReservationError
from deskbot.interfaces.booking_service import BookingLogger, BookingService, BookingSession
from deskbot.interfaces.models import BookingOptions, BookingOutcome, BookingWindow
from deskbot.utils.date_calculator import generate_booking_windows
from deskbot.utils.desk_priority import explain_desk_priorities, sort_desks_by_preference
from deskbot.utils.logger import ErrorTracker, log_booking_failure, log_workflow_end, log_workflow_start

debug_logger = logging.getLogger("deskbot")


class WorkflowState(Enum):
    """Booking run states"""
    NOT_LOGGED_IN = "not_logged_in"
    LOGGED_IN = "logged_in"
    PER_DATE_ATTEMPT = "per_date_attempt"
    DONE = "done"


class MultiDateBookingWorkflow:
    """
    Books the best available desk on every eligible date.

    Strategy:
    1. Validate options (before any request is sent)
    2. Log in once; AuthError aborts the run
    3. For each window, one at a time:
       - list desks, keep available ones
       - rank by preference, reserve the first
       - log the outcome and move on
    4. Return one BookingOutcome per window
    """

    def __init__(
        self,
        service: BookingService,
        options: BookingOptions,
        logger: Optional[BookingLogger] = None,
        error_tracker: Optional[ErrorTracker] = None
    ):
        self.service = service
        self.options = options
        self.logger = logger or debug_logger
        self.error_tracker = error_tracker
        self.state = WorkflowState.NOT_LOGGED_IN

    def generate_windows(self) -> List[BookingWindow]:
        """Booking windows for the configured date range and weekdays"""
        profile = self.options.profile
        return generate_booking_windows(
            start_date=self.options.book_from_date,
            day_count=self.options.book_for_days,
            weekdays=profile.weekdays,
            start_hour=profile.start_hour,
            end_hour=profile.end_hour,
            tz=self.options.tzinfo,
        )

    async def run(self) -> List[BookingOutcome]:
        """
        Execute the booking run.

        Returns:
            List of outcomes, one per eligible window, in date order

        Raises:
            ConfigurationError: If the options are invalid
            AuthError: If login fails
        """
        self.options.validate()
        windows = self.generate_windows()

        log_workflow_start(self.logger, "Multi-Date Desk Booking", {
            "User": self.options.credentials.username,
            "From": self.options.book_from_date.strftime("%Y-%m-%d"),
            "Days": self.options.book_for_days,
            "Dates to book": len(windows),
        })
        started = time.monotonic()

        self.state = WorkflowState.NOT_LOGGED_IN
        try:
            session = await self.service.login(self.options.credentials)
        except AuthError as e:
            self.logger.error(f"failed to login: {e}")
            raise
        self.state = WorkflowState.LOGGED_IN

        outcomes = []
        for window in windows:
            self.state = WorkflowState.PER_DATE_ATTEMPT
            outcomes.append(await self._book_window(session, window))

        self.state = WorkflowState.DONE

        booked = sum(1 for outcome in outcomes if outcome.success)
        self.logger.info(f"Booked {booked}/{len(outcomes)} dates")
        log_workflow_end(
            self.logger,
            "Multi-Date Desk Booking",
            success=booked == len(outcomes),
            duration=time.monotonic() - started
        )

        return outcomes

    async def _book_window(self, session: BookingSession, window: BookingWindow) -> BookingOutcome:
        """
        Try to book the best desk for one window.

        Returns:
            BookingOutcome (never raises for per-date failures)
        """
        profile = self.options.profile
        date_str = window.date.strftime("%Y-%m-%d")
        desk = None

        try:
            desks = await self.service.list_available_desks(session, window)
            available = [d for d in desks if d.is_available]
            self.logger.info(f"found {len(available)} available desks on {date_str}")

            if not available:
                raise NoDesksAvailable(f"No available desks on {date_str}")

            ranked = sort_desks_by_preference(available, profile.floors, profile.amenities)
            debug_logger.debug(explain_desk_priorities(ranked, profile.floors, profile.amenities))

            desk = ranked[0]
            booking_id = await self.service.reserve(session, desk.id, window)

        except (QueryError, ReservationError, NoDesksAvailable) as e:
            self.logger.error(f"failed to book desk on {date_str}: {e}")
            if self.error_tracker:
                log_booking_failure(
                    date_str,
                    e,
                    desk=desk.name if desk else None,
                    tracker=self.error_tracker,
                    window=str(window)
                )
            return BookingOutcome(window=window, success=False, desk=desk, error=str(e))

        self.logger.info(
            f"Booking created with id: {booking_id}, {desk.describe()}, "
            f"from: {window.start.isoformat()}, to: {window.end.isoformat()}"
        )
        return BookingOutcome(window=window, success=True, booking_id=booking_id, desk=desk)


async def run_multi_date_booking(
    options: Optional[BookingOptions] = None,
    service: Optional[BookingService] = None,
    logger: Optional[BookingLogger] = None,
    error_tracker: Optional[ErrorTracker] = None
) -> List[BookingOutcome]:
    """
    Quick helper to run a booking pass with defaults from Config.

    Args:
        options: Booking options (default: built from environment)
        service: Booking service (default: BookingsOneAPI)
        logger: Outcome logger (default: Rich console + rotating log file)
        error_tracker: Failure tracker (default: JSON lines under logs/errors)

    Returns:
        List of BookingOutcome, one per eligible date

    Example:
        from deskbot.workflows.multi_date_booking import run_multi_date_booking
        outcomes = await run_multi_date_booking()
        booked = [o.date_str for o in outcomes if o.success]
    """
    from deskbot.api.booking_api import BookingsOneAPI
    from deskbot.reporters.console_progress_reporter import ConsoleProgressReporter
    from deskbot.utils.file_logger import setup_file_logger

    options = options or Config.build_options()
    if logger is None:
        file_logger, _ = setup_file_logger()
        logger = ConsoleProgressReporter(file_logger=file_logger)
    if error_tracker is None:
        error_tracker = ErrorTracker(Config.LOGS_DIR / "errors")

    owns_service = service is None
    service = service or BookingsOneAPI(timezone=options.timezone)

    try:
        workflow = MultiDateBookingWorkflow(service, options, logger=logger, error_tracker=error_tracker)
        return await workflow.run()
    finally:
        if owns_service:
            await service.close()
