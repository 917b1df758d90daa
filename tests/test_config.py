import asyncio
import io
import json
import sys
from datetime import date
from unittest.mock import Mock

import pytest
from rich.console import Console

import book_desks
from config import Config
from deskbot.exceptions import ConfigurationError
from deskbot.interfaces.models import (
    Amenity,
    BookingOptions,
    BookingOutcome,
    Day,
    Floor,
    PreferenceProfile,
    parse_enum_names,
)
from deskbot.reporters.console_progress_reporter import ConsoleProgressReporter
from deskbot.utils.date_calculator import window_for_date
from deskbot.utils.file_logger import setup_file_logger


@pytest.fixture()
def env_config(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, "BOOKINGS_USERNAME", "someone@example.com")
    monkeypatch.setattr(Config, "BOOKINGS_PASSWORD", "secret")
    monkeypatch.setattr(Config, "PREFERRED_FLOORS", "FLOOR_26, FLOOR_27")
    monkeypatch.setattr(Config, "PREFERRED_AMENITIES", "SINGLE_MONITOR")
    monkeypatch.setattr(Config, "BOOK_FOR_WEEKDAYS", "THURSDAY,FRIDAY")
    monkeypatch.setattr(Config, "BOOK_FOR_DAYS", 14)
    monkeypatch.setattr(Config, "BOOKING_CONFIG_FILE", tmp_path / "missing.json")
    return Config


def test_parse_enum_names_accepts_names_and_values():
    assert parse_enum_names(Floor, "floor_27, 1") == (Floor.FLOOR_27, Floor.FLOOR_26)
    assert parse_enum_names(Day, "") == ()

    with pytest.raises(ConfigurationError):
        parse_enum_names(Amenity, "TRIPLE_MONITOR")


@pytest.mark.parametrize("kwargs", [
    {"start_hour": 18, "end_hour": 9},
    {"start_hour": 9, "end_hour": 9},
    {"start_hour": 9, "end_hour": 24},
    {"weekdays": frozenset()},
])
def test_invalid_profiles_are_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        PreferenceProfile(**kwargs).validate()


def test_profile_is_built_from_environment(env_config):
    profile = Config.build_profile()

    assert profile.floors == (Floor.FLOOR_26, Floor.FLOOR_27)
    assert profile.amenities == (Amenity.SINGLE_MONITOR,)
    assert profile.weekdays == {Day.THURSDAY, Day.FRIDAY}
    assert Config.build_options().validate().profile == profile


def test_missing_credentials_fail_validation(env_config, monkeypatch):
    monkeypatch.setattr(Config, "BOOKINGS_PASSWORD", "")

    with pytest.raises(ConfigurationError):
        Config.build_options().validate()


def test_options_from_file_override_defaults(env_config, tmp_path):
    config_file = tmp_path / "booking_config.json"
    config_file.write_text(json.dumps({
        "floor": ["FLOOR_27"],
        "book_for_weekday": ["MONDAY", 3],
        "book_from_date": "2024-02-19",
        "start_hour": 8,
    }))

    options = BookingOptions.from_file(config_file, defaults=Config.build_options())

    assert options.profile.floors == (Floor.FLOOR_27,)
    assert options.profile.amenities == (Amenity.SINGLE_MONITOR,)
    assert options.profile.weekdays == {Day.MONDAY, Day.WEDNESDAY}
    assert options.profile.start_hour == 8
    assert options.book_from_date == date(2024, 2, 19)
    assert options.book_for_days == 14
    assert options.credentials.username == "someone@example.com"


def test_unreadable_config_file_is_a_configuration_error(tmp_path):
    config_file = tmp_path / "broken.json"
    config_file.write_text("{not json")

    with pytest.raises(ConfigurationError):
        BookingOptions.from_file(config_file)


def test_unknown_timezone_fails_validation(env_config):
    options = BookingOptions.from_dict({"timezone": "Mars/Olympus_Mons"}, defaults=Config.build_options())

    with pytest.raises(ConfigurationError):
        options.validate()


def test_command_line_overrides_date_range(env_config):
    options = book_desks.build_options_from_args(["--from", "2024-02-19", "--days", "6"])

    assert options.book_from_date == date(2024, 2, 19)
    assert options.book_for_days == 6
    assert options.profile.weekdays == {Day.THURSDAY, Day.FRIDAY}


@pytest.mark.parametrize("argv", [["--days", "-1"], ["--days"], ["--from", "19/02/2024"]])
def test_bad_command_line_values_are_rejected(env_config, argv):
    with pytest.raises(ConfigurationError):
        book_desks.build_options_from_args(argv)


def test_console_reporter_prints_and_mirrors_to_file_logger():
    output = io.StringIO()
    file_logger = Mock()
    reporter = ConsoleProgressReporter(console=Console(file=output, width=120), file_logger=file_logger)

    reporter.info("found 3 desks")
    reporter.error("failed to book desk on 2024-02-20")
    reporter.print_summary_table([
        BookingOutcome(window=window_for_date(date(2024, 2, 19), 9, 18), success=True, booking_id=1),
        BookingOutcome(window=window_for_date(date(2024, 2, 20), 9, 18), success=False, error="taken"),
    ])

    text = output.getvalue()
    assert "found 3 desks" in text
    assert "Booking Summary" in text
    assert "2024-02-20" in text
    assert reporter.messages == ["found 3 desks", "failed to book desk on 2024-02-20"]
    file_logger.info.assert_called_once_with("found 3 desks")
    file_logger.error.assert_called_once_with("failed to book desk on 2024-02-20")


def test_dry_run_prints_windows_without_booking(env_config, monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(Config, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setenv("COLUMNS", "160")
    monkeypatch.setattr(sys, "argv", ["book_desks.py", "--dry-run", "--from", "2024-02-19", "--days", "6"])

    assert asyncio.run(book_desks.main()) == 0

    output = capsys.readouterr().out
    assert "2024-02-22" in output
    assert "2024-02-23" in output
    assert "2024-02-19" not in output.split("Booking Windows")[1]


def test_file_logger_writes_rotating_log(tmp_path):
    logger, log_file = setup_file_logger(name="deskbot.test_file_logger", logs_dir=tmp_path)
    try:
        logger.info("found 3 desks")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.parent == tmp_path
        assert log_file.name.startswith("booking_")
        assert "found 3 desks" in log_file.read_text(encoding="utf-8")
        assert setup_file_logger(name="deskbot.test_file_logger", logs_dir=tmp_path)[1] == log_file
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_file_logger_defaults_come_from_config(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Config, "MAX_BOOKING_LOG_SIZE_MB", 2)
    monkeypatch.setattr(Config, "LOG_BACKUP_COUNT", 5)

    logger, log_file = setup_file_logger(name="deskbot.test_file_logger_defaults")
    try:
        handler = logger.handlers[0]
        assert log_file.parent == tmp_path / "logs"
        assert handler.maxBytes == 2 * 1024 * 1024
        assert handler.backupCount == 5
        assert not logger.propagate
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


@pytest.mark.parametrize("data", [
    {"start_hour": "nine"},
    {"end_hour": None},
    {"book_for_days": "a month"},
    {"book_for_days": True},
    {"floor": 27},
])
def test_malformed_config_values_are_configuration_errors(env_config, data):
    with pytest.raises(ConfigurationError):
        BookingOptions.from_dict(data, defaults=Config.build_options())


def test_numeric_strings_in_config_are_accepted(env_config):
    options = BookingOptions.from_dict({"start_hour": "8", "book_for_days": 5}, defaults=Config.build_options())

    assert options.profile.start_hour == 8
    assert options.book_for_days == 5
