from datetime import date
from typing import Dict, List, Optional

import pytest

from deskbot.exceptions import AuthError, QueryError, ReservationError
from deskbot.interfaces.booking_service import BookingLogger, BookingService, BookingSession
from deskbot.interfaces.models import (
    ALL_WEEKDAYS,
    AmenityInfo,
    AvailabilityStatus,
    BookingOptions,
    Credentials,
    DeskRecord,
    FloorInfo,
    PreferenceProfile,
)


class FakeBookingService(BookingService):
    """In-memory booking service that records every call"""

    def __init__(
        self,
        desks: Optional[List[DeskRecord]] = None,
        desks_by_date: Optional[Dict[date, List[DeskRecord]]] = None,
        fail_login: bool = False,
        fail_query_on: tuple = (),
        fail_reserve_on: tuple = ()
    ):
        self.desks = desks or []
        self.desks_by_date = desks_by_date or {}
        self.fail_login = fail_login
        self.fail_query_on = set(fail_query_on)
        self.fail_reserve_on = set(fail_reserve_on)
        self.login_calls = []
        self.list_calls = []
        self.reserve_calls = []

    async def login(self, credentials):
        self.login_calls.append(credentials)
        if self.fail_login:
            raise AuthError("invalid credentials")
        return BookingSession(username=credentials.username, user_id=42)

    async def list_available_desks(self, session, window, floors=None, amenities=None):
        self.list_calls.append((session, window))
        if window.date in self.fail_query_on:
            raise QueryError("desk query timed out")
        return list(self.desks_by_date.get(window.date, self.desks))

    async def reserve(self, session, desk_id, window):
        self.reserve_calls.append((session, desk_id, window))
        if window.date in self.fail_reserve_on:
            raise ReservationError(f"desk {desk_id} is no longer available")
        return 1000 + len(self.reserve_calls)


class RecordingLogger(BookingLogger):
    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, message):
        self.infos.append(message)

    def error(self, message):
        self.errors.append(message)


@pytest.fixture()
def make_desk():
    def _make_desk(desk_id, floor_id, amenity_ids=(), status=AvailabilityStatus.AVAILABLE, name=None):
        return DeskRecord(
            id=desk_id,
            name=name or f"Desk {desk_id}",
            floor=FloorInfo(id=floor_id, name=f"{floor_id}/F"),
            amenities=tuple(AmenityInfo(id=a, name=getattr(a, "name", str(a))) for a in amenity_ids),
            status=status,
        )
    return _make_desk


@pytest.fixture()
def make_options():
    def _make_options(book_from_date=date(2024, 2, 19), book_for_days=2, weekdays=ALL_WEEKDAYS, **profile_kwargs):
        return BookingOptions(
            credentials=Credentials(username="someone@example.com", password="secret"),
            profile=PreferenceProfile(weekdays=frozenset(weekdays), **profile_kwargs),
            book_from_date=book_from_date,
            book_for_days=book_for_days,
            timezone="Asia/Hong_Kong",
        )
    return _make_options


@pytest.fixture()
def recording_logger():
    return RecordingLogger()
