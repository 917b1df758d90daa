"""
Booking Window Calculator

Expands a start date and day count into booking windows:
- Steps through calendar days (not fixed 24h durations, so DST never skews)
- Keeps only the selected weekdays (0=Sunday, 6=Saturday)
- Builds start/end timestamps from the configured work hours
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Iterator, List, Optional, Union

from deskbot.interfaces.models import BookingWindow, Day


def to_service_weekday(day: date) -> Day:
    """
    Weekday of a date in booking-service numbering.

    Python's date.weekday() is 0=Monday; the service uses 0=Sunday.
    """
    return Day(day.isoweekday() % 7)


def iter_calendar_dates(start_date: Union[date, datetime], day_count: int) -> Iterator[date]:
    """
    Yield day_count + 1 consecutive dates starting at start_date.

    Args:
        start_date: First date (a datetime is truncated to its date)
        day_count: Number of days after start_date to include

    Raises:
        ValueError: If day_count is negative
    """
    if day_count < 0:
        raise ValueError(f"day_count must not be negative, got {day_count}")

    if isinstance(start_date, datetime):
        start_date = start_date.date()

    for offset in range(day_count + 1):
        yield start_date + timedelta(days=offset)


def window_for_date(day: date, start_hour: int, end_hour: int, tz: Optional[tzinfo] = None) -> BookingWindow:
    """Build the start_hour:00 to end_hour:00 window for one date in tz"""
    return BookingWindow(
        start=datetime.combine(day, time(hour=start_hour), tzinfo=tz),
        end=datetime.combine(day, time(hour=end_hour), tzinfo=tz),
    )


def generate_booking_windows(
    start_date: Union[date, datetime],
    day_count: int,
    weekdays: Iterable[int],
    start_hour: int = 9,
    end_hour: int = 18,
    tz: Optional[tzinfo] = None
) -> List[BookingWindow]:
    """
    Calculate booking windows for eligible weekdays.

    Args:
        start_date: First candidate date
        day_count: How many days after start_date to consider (0 = start date only)
        weekdays: Eligible weekday numbers (0=Sunday..6=Saturday)
        start_hour: Work day start hour
        end_hour: Work day end hour
        tz: Timezone for the window timestamps (None = naive)

    Returns:
        List of BookingWindow in chronological order

    Example:
        >>> windows = generate_booking_windows(date(2024, 2, 19), 6, {Day.MONDAY, Day.WEDNESDAY})
        >>> [str(w) for w in windows]
        ['2024-02-19 09:00-18:00', '2024-02-21 09:00-18:00']
    """
    eligible = {int(day) for day in weekdays}

    return [
        window_for_date(day, start_hour, end_hour, tz)
        for day in iter_calendar_dates(start_date, day_count)
        if to_service_weekday(day) in eligible
    ]
