from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from deskbot.interfaces.models import ALL_WEEKDAYS, Day
from deskbot.utils.date_calculator import (
    generate_booking_windows,
    iter_calendar_dates,
    to_service_weekday,
    window_for_date,
)

HONG_KONG = ZoneInfo("Asia/Hong_Kong")


def test_zero_day_count_yields_single_window_with_work_hours():
    windows = generate_booking_windows(date(2024, 2, 19), 0, ALL_WEEKDAYS, 9, 18, HONG_KONG)

    assert len(windows) == 1
    assert windows[0].start == datetime(2024, 2, 19, 9, 0, tzinfo=HONG_KONG)
    assert windows[0].end == datetime(2024, 2, 19, 18, 0, tzinfo=HONG_KONG)


def test_zero_day_count_on_ineligible_weekday_is_empty():
    # 2024-02-18 is a Sunday
    assert generate_booking_windows(date(2024, 2, 18), 0, {Day.MONDAY}) == []


def test_day_count_six_covers_seven_dates():
    dates = list(iter_calendar_dates(date(2024, 2, 19), 6))

    assert len(dates) == 7
    assert dates[0] == date(2024, 2, 19)
    assert dates[-1] == date(2024, 2, 25)
    assert len(generate_booking_windows(date(2024, 2, 19), 6, ALL_WEEKDAYS)) == 7


def test_weekday_filter_keeps_monday_and_wednesday():
    windows = generate_booking_windows(date(2024, 2, 19), 6, {Day.MONDAY, Day.WEDNESDAY})

    assert [w.date for w in windows] == [date(2024, 2, 19), date(2024, 2, 21)]


def test_service_weekday_numbering_starts_on_sunday():
    assert to_service_weekday(date(2024, 2, 18)) == Day.SUNDAY
    assert to_service_weekday(date(2024, 2, 19)) == Day.MONDAY
    assert to_service_weekday(date(2024, 2, 24)) == Day.SATURDAY


def test_datetime_start_is_truncated_to_its_date():
    windows = generate_booking_windows(datetime(2024, 2, 19, 23, 30), 1, ALL_WEEKDAYS, 9, 18)

    assert [w.date for w in windows] == [date(2024, 2, 19), date(2024, 2, 20)]
    assert windows[0].start == datetime(2024, 2, 19, 9, 0)


def test_windows_keep_local_hours_across_dst_change():
    new_york = ZoneInfo("America/New_York")
    # DST starts on 2024-03-10
    windows = generate_booking_windows(date(2024, 3, 9), 2, ALL_WEEKDAYS, 9, 18, new_york)

    assert [w.start.hour for w in windows] == [9, 9, 9]
    assert [w.end.hour for w in windows] == [18, 18, 18]
    assert windows[0].start.utcoffset() != windows[2].start.utcoffset()


def test_generation_is_restartable():
    first = generate_booking_windows(date(2024, 2, 19), 13, {Day.TUESDAY})
    second = generate_booking_windows(date(2024, 2, 19), 13, {Day.TUESDAY})

    assert first == second
    assert len(first) == 2


def test_negative_day_count_is_rejected():
    with pytest.raises(ValueError):
        generate_booking_windows(date(2024, 2, 19), -1, ALL_WEEKDAYS)


def test_window_for_date_formats_readably():
    window = window_for_date(date(2024, 2, 19), 8, 17)

    assert str(window) == "2024-02-19 08:00-17:00"
    assert window.date == date(2024, 2, 19)
