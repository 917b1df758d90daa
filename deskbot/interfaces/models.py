"""
Booking Data Model

Identifiers, preferences, windows and desk records shared by the
date calculator, the desk ranker and the booking workflow.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from deskbot.exceptions import ConfigurationError


class Floor(IntEnum):
    """Floor ids known to the bookings.one tenant"""
    FLOOR_26 = 1
    FLOOR_27 = 2


class Amenity(IntEnum):
    """Desk amenity ids"""
    SINGLE_MONITOR = 8
    DOUBLE_MONITOR = 9
    PARTITION_PANEL = 10
    HEIGHT_ADJUSTABLE = 11


class Day(IntEnum):
    """Weekday numbers as used by the booking service (0=Sunday)"""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


ALL_WEEKDAYS: FrozenSet[Day] = frozenset(Day)

# Ids outside the enums are kept as plain ints
FloorId = Union[Floor, int]
AmenityId = Union[Amenity, int]
BookingId = Union[int, str]


class AvailabilityStatus(Enum):
    """Desk availability for a queried window"""
    AVAILABLE = "available"
    OCCUPIED = "occupied"


def parse_enum_names(enum_cls, raw: str) -> Tuple:
    """
    Parse a comma-separated list of enum member names or values.

    Args:
        enum_cls: IntEnum class to parse into
        raw: Value like "FLOOR_27, FLOOR_26" or "2,1"

    Returns:
        Tuple of enum members in the given order
    """
    members = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            if token.lstrip("-").isdigit():
                members.append(enum_cls(int(token)))
            else:
                members.append(enum_cls[token.upper()])
        except (KeyError, ValueError):
            raise ConfigurationError(f"Unknown {enum_cls.__name__} '{token}'")
    return tuple(members)


@dataclass(frozen=True)
class PreferenceProfile:
    """
    Booking preferences for a single run.

    floors and amenities are ordered most-preferred first.
    """
    floors: Tuple[FloorId, ...] = (Floor.FLOOR_27, Floor.FLOOR_26)
    amenities: Tuple[AmenityId, ...] = (Amenity.DOUBLE_MONITOR, Amenity.SINGLE_MONITOR)
    weekdays: FrozenSet[Day] = frozenset({Day.MONDAY, Day.TUESDAY, Day.WEDNESDAY})
    start_hour: int = 9
    end_hour: int = 18

    def validate(self) -> "PreferenceProfile":
        """Raise ConfigurationError if the profile cannot be used for booking"""
        for name, hour in (("start_hour", self.start_hour), ("end_hour", self.end_hour)):
            if not 0 <= hour <= 23:
                raise ConfigurationError(f"{name} must be between 0 and 23, got {hour}")
        if self.start_hour >= self.end_hour:
            raise ConfigurationError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        if not self.weekdays:
            raise ConfigurationError("At least one weekday must be selected for booking")
        return self


@dataclass(frozen=True)
class Credentials:
    """Login credentials for the booking service"""
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class BookingWindow:
    """Start/end timestamps for one calendar date"""
    start: datetime
    end: datetime

    @property
    def date(self) -> date:
        return self.start.date()

    def __str__(self):
        return f"{self.start:%Y-%m-%d %H:%M}-{self.end:%H:%M}"


@dataclass(frozen=True)
class FloorInfo:
    id: FloorId
    name: str = ""


@dataclass(frozen=True)
class AmenityInfo:
    id: AmenityId
    name: str = ""


@dataclass(frozen=True)
class DeskRecord:
    """A bookable desk as returned by the booking service"""
    id: int
    name: str
    floor: FloorInfo
    amenities: Tuple[AmenityInfo, ...] = ()
    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE

    @property
    def is_available(self) -> bool:
        return self.status == AvailabilityStatus.AVAILABLE

    @property
    def amenity_ids(self) -> Tuple[AmenityId, ...]:
        return tuple(amenity.id for amenity in self.amenities)

    def describe(self) -> str:
        """One-line description used in log messages"""
        amenities = ", ".join(amenity.name or str(amenity.id) for amenity in self.amenities)
        floor = self.floor.name or str(self.floor.id)
        return f"desk: {self.name}, floor: {floor}, with amenities: {amenities or 'none'}"


@dataclass
class BookingOutcome:
    """Result of processing one booking window"""
    window: BookingWindow
    success: bool
    booking_id: Optional[BookingId] = None
    desk: Optional[DeskRecord] = None
    error: Optional[str] = None

    @property
    def date_str(self) -> str:
        return self.window.date.strftime("%Y-%m-%d")


@dataclass(frozen=True)
class BookingOptions:
    """
    Everything a booking run needs: credentials, preferences and date range.

    Can be built programmatically or loaded from a JSON file such as
    config/booking_config.json:

        {
            "username": "me@example.com",
            "password": "...",
            "floor": ["FLOOR_27", "FLOOR_26"],
            "amenity": ["DOUBLE_MONITOR", "SINGLE_MONITOR"],
            "book_for_weekday": ["MONDAY", "TUESDAY", "WEDNESDAY"],
            "book_from_date": "2024-02-19",
            "book_for_days": 31,
            "start_hour": 9,
            "end_hour": 18,
            "timezone": "Asia/Hong_Kong"
        }
    """
    credentials: Credentials
    profile: PreferenceProfile
    book_from_date: date
    book_for_days: int = 31
    timezone: str = "Asia/Hong_Kong"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: Optional["BookingOptions"] = None) -> "BookingOptions":
        """
        Create options from a dictionary, falling back to defaults for missing keys.

        Raises:
            ConfigurationError: On unknown enum names, malformed dates or non-integer numbers
        """
        base_profile = defaults.profile if defaults else PreferenceProfile()

        def _enum_list(key, enum_cls, fallback):
            if key not in data:
                return tuple(fallback)
            value = data[key]
            if isinstance(value, str):
                return parse_enum_names(enum_cls, value)
            if not isinstance(value, (list, tuple)):
                raise ConfigurationError(f"{key} must be a list or a comma-separated string, got {value!r}")
            return parse_enum_names(enum_cls, ",".join(str(v) for v in value))

        def _int(key, fallback):
            value = data.get(key, fallback)
            if isinstance(value, bool):
                raise ConfigurationError(f"{key} must be an integer, got {value!r}")
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ConfigurationError(f"{key} must be an integer, got {value!r}")

        profile = PreferenceProfile(
            floors=_enum_list("floor", Floor, base_profile.floors),
            amenities=_enum_list("amenity", Amenity, base_profile.amenities),
            weekdays=frozenset(_enum_list("book_for_weekday", Day, base_profile.weekdays)),
            start_hour=_int("start_hour", base_profile.start_hour),
            end_hour=_int("end_hour", base_profile.end_hour),
        )

        if "book_from_date" in data:
            try:
                book_from = datetime.strptime(data["book_from_date"], "%Y-%m-%d").date()
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"book_from_date must be in 'YYYY-MM-DD' format, got {data['book_from_date']!r}"
                )
        elif defaults:
            book_from = defaults.book_from_date
        else:
            book_from = date.today()

        username = data.get("username", defaults.credentials.username if defaults else "")
        password = data.get("password", defaults.credentials.password if defaults else "")

        return cls(
            credentials=Credentials(username=username, password=password),
            profile=profile,
            book_from_date=book_from,
            book_for_days=_int("book_for_days", defaults.book_for_days if defaults else 31),
            timezone=data.get("timezone", defaults.timezone if defaults else "Asia/Hong_Kong"),
        )

    @classmethod
    def from_file(cls, config_path: Path, defaults: Optional["BookingOptions"] = None) -> "BookingOptions":
        """Load from JSON file"""
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {config_path}: {e}")
        return cls.from_dict(data, defaults=defaults)

    def validate(self) -> "BookingOptions":
        """Validate eagerly, before any request is sent"""
        if not self.credentials.username or not self.credentials.password:
            raise ConfigurationError(
                "Missing credentials. Set BOOKINGS_USERNAME and BOOKINGS_PASSWORD in .env "
                "or provide username/password in the config file."
            )
        if self.book_for_days < 0:
            raise ConfigurationError(f"book_for_days must not be negative, got {self.book_for_days}")
        self.profile.validate()
        self.tzinfo  # raises on unknown zone names
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(f"Unknown timezone '{self.timezone}'")
