"""
Booking Service Interfaces
Abstract collaborators consumed by the booking workflow: the remote booking
service and the logger that surfaces per-date outcomes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from deskbot.interfaces.models import (
    AmenityId,
    BookingId,
    BookingWindow,
    Credentials,
    DeskRecord,
    FloorId,
)


@dataclass
class BookingSession:
    """
    Authenticated session handle returned by BookingService.login.

    The workflow owns it and passes it to every list/reserve call.
    `client` holds whatever transport state the service needs (for the
    HTTP service this is the aiohttp ClientSession carrying the cookies).
    """
    username: str
    user_id: Optional[int] = None
    display_name: Optional[str] = None
    client: Any = field(default=None, repr=False)


class BookingService(ABC):
    """Abstract base class for desk booking backends"""

    @abstractmethod
    async def login(self, credentials: Credentials) -> BookingSession:
        """
        Authenticate and return a session handle.

        Raises:
            AuthError: On invalid credentials or transport failure
        """

    @abstractmethod
    async def list_available_desks(
        self,
        session: BookingSession,
        window: BookingWindow,
        floors: Optional[Sequence[FloorId]] = None,
        amenities: Optional[Sequence[AmenityId]] = None,
    ) -> List[DeskRecord]:
        """
        List desks for a booking window.

        floors/amenities are optional server-side filter hints. An empty
        list is a valid result.

        Raises:
            QueryError: On transport or parse failure
        """

    @abstractmethod
    async def reserve(self, session: BookingSession, desk_id: int, window: BookingWindow) -> BookingId:
        """
        Book a desk for the window.

        Raises:
            ReservationError: If the desk is gone or the service rejects the request
        """

    async def close(self):
        """Release transport resources (no-op by default)"""


class BookingLogger(ABC):
    """
    Minimal logger used to surface outcomes.

    logging.Logger satisfies this structurally, so any stdlib logger can be
    passed wherever a BookingLogger is expected.
    """

    @abstractmethod
    def info(self, message: str):
        """Report an informational message"""

    @abstractmethod
    def error(self, message: str):
        """Report a failure"""
