"""
Desk Booking Runner

Books the best available desk for every eligible weekday in the date range.
Settings come from .env (see config.py) and optionally a JSON config file.

Usage:
    python book_desks.py                                  # Book from today for BOOK_FOR_DAYS days
    python book_desks.py --from 2024-02-19 --days 6       # Custom date range
    python book_desks.py --config config/booking_config.json
    python book_desks.py --dry-run                        # Only show the windows that would be booked
"""

import asyncio
import sys
from pathlib import Path

from config import Config
from deskbot.exceptions import AuthError, ConfigurationError
from deskbot.interfaces.models import BookingOptions
from deskbot.reporters.console_progress_reporter import ConsoleProgressReporter
from deskbot.utils.file_logger import setup_file_logger
from deskbot.workflows.multi_date_booking import MultiDateBookingWorkflow, run_multi_date_booking


def get_flag_value(argv: list, flag: str):
    """Value following a flag like --days 6, or None"""
    if flag in argv:
        index = argv.index(flag)
        if index + 1 < len(argv):
            return argv[index + 1]
        raise ConfigurationError(f"{flag} needs a value")
    return None


def build_options_from_args(argv: list) -> BookingOptions:
    """Environment defaults, overridden by --config, --from and --days"""
    options = Config.build_options()

    config_path = get_flag_value(argv, "--config")
    if config_path:
        options = BookingOptions.from_file(Path(config_path), defaults=options)
    elif Config.BOOKING_CONFIG_FILE.exists():
        options = BookingOptions.from_file(Config.BOOKING_CONFIG_FILE, defaults=options)

    overrides = {}
    from_date = get_flag_value(argv, "--from")
    if from_date:
        overrides["book_from_date"] = from_date
    days = get_flag_value(argv, "--days")
    if days:
        if not days.isdigit():
            raise ConfigurationError(f"--days must be a non-negative integer, got {days!r}")
        overrides["book_for_days"] = int(days)

    if overrides:
        options = BookingOptions.from_dict(overrides, defaults=options)
    return options


async def main():
    """
    Run one booking pass.

    Exit code 0 when every eligible date was booked, 1 otherwise.
    """
    argv = sys.argv[1:]
    dry_run = "--dry-run" in argv

    file_logger, log_file = setup_file_logger()
    reporter = ConsoleProgressReporter(file_logger=file_logger)
    reporter.print_header()

    try:
        options = build_options_from_args(argv)

        if dry_run:
            options.profile.validate()
            windows = MultiDateBookingWorkflow(None, options).generate_windows()
            reporter.print_windows(windows)
            reporter.info(f"{len(windows)} date(s) would be booked (dry run, nothing sent)")
            return 0

        outcomes = await run_multi_date_booking(options=options, logger=reporter)
    except ConfigurationError as e:
        reporter.error(f"Configuration error: {e}")
        return 1
    except AuthError:
        reporter.error("Login failed, no dates were processed")
        return 1

    reporter.print_summary_table(outcomes)
    reporter.info(f"Log file: {log_file}")

    if all(outcome.success for outcome in outcomes):
        return 0
    return 1


def run():
    """Console script entry point"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
