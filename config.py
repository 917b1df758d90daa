"""
Configuration management for the desk booking bot
Loads environment variables and provides centralized config access
"""
import os
from datetime import date
from pathlib import Path
from dotenv import load_dotenv

from deskbot.exceptions import ConfigurationError
from deskbot.interfaces.models import (
    Amenity,
    BookingOptions,
    Credentials,
    Day,
    Floor,
    PreferenceProfile,
    parse_enum_names,
)

# Load environment variables
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


class Config:
    """Central configuration class"""

    # Base paths
    BASE_DIR = Path(__file__).parent
    LOGS_DIR = BASE_DIR / "logs"
    BOOKING_CONFIG_FILE = BASE_DIR / "config" / "booking_config.json"

    # bookings.one tenant
    BOOKINGS_BASE_URL = os.getenv("BOOKINGS_BASE_URL", "https://fujifilm.bookings.one/api")
    BOOKINGS_ORIGIN = os.getenv("BOOKINGS_ORIGIN", "https://fujifilm.bookings.one")
    REQUEST_TIMEOUT = _int_env("REQUEST_TIMEOUT", 30)  # seconds

    # Credentials
    BOOKINGS_USERNAME = os.getenv("BOOKINGS_USERNAME", "")
    BOOKINGS_PASSWORD = os.getenv("BOOKINGS_PASSWORD", "")

    # Booking Configuration
    # Work hours in 24-hour time (the service allows at most 10 hours per booking)
    TIMEZONE = os.getenv("TIMEZONE", "Asia/Hong_Kong")
    START_HOUR = _int_env("START_HOUR", 9)
    END_HOUR = _int_env("END_HOUR", 18)
    BOOK_FOR_DAYS = _int_env("BOOK_FOR_DAYS", 31)

    # Preferences: comma-separated enum names, most preferred first
    PREFERRED_FLOORS = os.getenv("PREFERRED_FLOORS", "FLOOR_27,FLOOR_26")
    PREFERRED_AMENITIES = os.getenv("PREFERRED_AMENITIES", "DOUBLE_MONITOR,SINGLE_MONITOR")
    BOOK_FOR_WEEKDAYS = os.getenv("BOOK_FOR_WEEKDAYS", "MONDAY,TUESDAY,WEDNESDAY")

    # Logging Configuration
    MAX_BOOKING_LOG_SIZE_MB = _int_env("MAX_BOOKING_LOG_SIZE_MB", 10)
    LOG_BACKUP_COUNT = _int_env("LOG_BACKUP_COUNT", 3)

    @classmethod
    def build_profile(cls) -> PreferenceProfile:
        """Preference profile from environment settings"""
        return PreferenceProfile(
            floors=parse_enum_names(Floor, cls.PREFERRED_FLOORS),
            amenities=parse_enum_names(Amenity, cls.PREFERRED_AMENITIES),
            weekdays=frozenset(parse_enum_names(Day, cls.BOOK_FOR_WEEKDAYS)),
            start_hour=cls.START_HOUR,
            end_hour=cls.END_HOUR,
        )

    @classmethod
    def build_options(cls, book_from_date: date = None) -> BookingOptions:
        """Booking options from environment settings"""
        return BookingOptions(
            credentials=Credentials(username=cls.BOOKINGS_USERNAME, password=cls.BOOKINGS_PASSWORD),
            profile=cls.build_profile(),
            book_from_date=book_from_date or date.today(),
            book_for_days=cls.BOOK_FOR_DAYS,
            timezone=cls.TIMEZONE,
        )
