"""
Direct API-based booking against bookings.one.
Logs in over the identity endpoint and talks GraphQL to the batch endpoint.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiohttp

from config import Config
from deskbot.api.queries import (
    ADD_BOOKING,
    ADD_BOOKING_MUTATION,
    ADD_BOOKING_PATH,
    BOOKABLE_RESOURCES_PATH,
    LIST_BOOKABLE_RESOURCES,
    LIST_BOOKABLE_RESOURCES_QUERY,
)
from deskbot.exceptions import AuthError, QueryError, ReservationError, ServiceError
from deskbot.interfaces.booking_service import BookingService, BookingSession
from deskbot.interfaces.models import (
    Amenity,
    AmenityId,
    AmenityInfo,
    AvailabilityStatus,
    BookingId,
    BookingWindow,
    Credentials,
    DeskRecord,
    Floor,
    FloorId,
    FloorInfo,
)

LOGIN_PATH = "app/identity/v1/login"
GRAPHQL_BATCH_PATH = "graphql/batch"


def format_timestamp(value: datetime) -> str:
    """Format as YYYY-MM-DDTHH:MM:SS+HH:MM (naive values use the local zone)"""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec="seconds")


def localized_text(names: Optional[List[Dict[str, Any]]]) -> str:
    """First text of a [{"language": ..., "text": ...}] list"""
    if not names or not isinstance(names[0], dict):
        return ""
    return names[0].get("text") or ""


def _known_id(enum_cls, raw_id):
    try:
        return enum_cls(raw_id)
    except ValueError:
        return raw_id


def parse_desk(resource: Dict[str, Any]) -> DeskRecord:
    """
    Convert a bookable resource from the GraphQL response to a DeskRecord.

    Unknown availability statuses are treated as occupied.

    Raises:
        QueryError: If the resource or one of its nested nodes is not an object
    """
    if not isinstance(resource, dict):
        raise QueryError(f"Malformed desk in response: {resource!r}")

    floor = resource.get("floor") or {}
    availability = resource.get("availability") or {}
    amenities = resource.get("amenities") or []
    if not isinstance(floor, dict) or not isinstance(availability, dict):
        raise QueryError(f"Malformed floor or availability for desk {resource.get('id')}")
    if not all(isinstance(amenity, dict) for amenity in amenities):
        raise QueryError(f"Malformed amenities for desk {resource.get('id')}")

    try:
        status = AvailabilityStatus(availability.get("status"))
    except ValueError:
        status = AvailabilityStatus.OCCUPIED

    return DeskRecord(
        id=resource["id"],
        name=localized_text(resource.get("name")),
        floor=FloorInfo(id=_known_id(Floor, floor.get("id")), name=localized_text(floor.get("name"))),
        amenities=tuple(
            AmenityInfo(id=_known_id(Amenity, amenity["id"]), name=localized_text(amenity.get("name")))
            for amenity in amenities
        ),
        status=status,
    )


def extract_batch_result(data: Any, path: Tuple[str, ...], error_cls=ServiceError) -> Any:
    """
    Walk into the first entry of a GraphQL batch response.

    Raises:
        error_cls: If the entry carries GraphQL errors or the path is missing
    """
    try:
        node = data[0]
    except (IndexError, KeyError, TypeError):
        raise error_cls(f"Unexpected batch response: {str(data)[:200]}")

    if isinstance(node, dict) and node.get("errors"):
        raise error_cls("GraphQL errors", errors=node["errors"])

    for key in path:
        try:
            node = node[key]
        except (KeyError, TypeError):
            raise error_cls(f"Missing '{key}' in response")
    return node


def build_list_desks_operation(
    window: BookingWindow,
    floors: Optional[Sequence[FloorId]] = None,
    amenities: Optional[Sequence[AmenityId]] = None
) -> Dict[str, Any]:
    """GraphQL batch entry querying desks for a window"""
    return {
        "operationName": LIST_BOOKABLE_RESOURCES,
        "variables": {
            "floorIds": [int(f) for f in floors or []],
            "bookableResourceType": "desk",
            "categories": [],
            "capacityRanges": [],
            "amenityIds": [int(a) for a in amenities or []],
            "availableStart": format_timestamp(window.start),
            "availableEnd": format_timestamp(window.end),
        },
        "query": LIST_BOOKABLE_RESOURCES_QUERY,
    }


def build_add_booking_operation(desk_id: int, window: BookingWindow, timezone: str) -> Dict[str, Any]:
    """GraphQL batch entry booking one desk for a window"""
    return {
        "operationName": ADD_BOOKING,
        "variables": {
            "request": {
                "subject": "",
                "htmlBody": "",
                "textBody": "",
                "period": {
                    "start": format_timestamp(window.start),
                    "startTimeZone": timezone,
                    "end": format_timestamp(window.end),
                    "endTimeZone": timezone,
                },
                "resources": [
                    {
                        "emailAddress": None,
                        "bookableResourceId": desk_id,
                    }
                ],
                "attendees": [],
                "isAllDay": False,
                "sensitive": "normal",
                "recurrence": None,
                "serviceItems": [],
                "withOnlineMeeting": False,
                "delegateUserId": None,
                "extraFieldData": [],
                "appointmentDraftId": None,
            }
        },
        "query": ADD_BOOKING_MUTATION,
    }


class BookingsOneAPI(BookingService):
    """bookings.one implementation of BookingService"""

    def __init__(
        self,
        base_url: str = None,
        origin: str = None,
        timezone: str = None,
        timeout: int = None,
        logger: logging.Logger = None
    ):
        self.base_url = (base_url or Config.BOOKINGS_BASE_URL).rstrip("/")
        self.origin = origin or Config.BOOKINGS_ORIGIN
        self.timezone = timezone or Config.TIMEZONE
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.logger = logger or logging.getLogger("deskbot")
        self._clients: List[aiohttp.ClientSession] = []

    def _create_client(self) -> aiohttp.ClientSession:
        client = aiohttp.ClientSession(
            headers={
                "Content-Type": "application/json",
                "Origin": self.origin,
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        self._clients.append(client)
        return client

    async def _post_json(self, client: aiohttp.ClientSession, path: str, payload: Any) -> Tuple[int, Any]:
        """
        POST a JSON payload and return (status, decoded body).

        Raises:
            aiohttp.ClientError, asyncio.TimeoutError: On transport failure
        """
        url = f"{self.base_url}/{path}"
        async with client.post(url, json=payload) as response:
            try:
                data = await response.json(content_type=None)
            except ValueError:
                data = None
            return response.status, data

    async def login(self, credentials: Credentials) -> BookingSession:
        """
        Log in and keep the returned cookies on a dedicated client.

        Raises:
            AuthError: If the login is rejected or the request fails
        """
        client = self._create_client()
        payload = {
            "emailOrUserName": credentials.username,
            "password": credentials.password,
            "rememberMe": True,
        }

        try:
            status, data = await self._post_json(client, LOGIN_PATH, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthError(f"Login request failed: {e}") from e

        if status >= 400:
            raise AuthError(f"Login rejected for {credentials.username} (HTTP {status})")

        user = {}
        if isinstance(data, dict):
            if data.get("isSuccess") is False:
                raise AuthError(f"Login rejected for {credentials.username}")
            user = data.get("user") or {}
            if not isinstance(user, dict):
                user = {}

        self.logger.info(f"Logged in as {user.get('displayName') or credentials.username}")

        return BookingSession(
            username=credentials.username,
            user_id=user.get("id"),
            display_name=user.get("displayName"),
            client=client,
        )

    async def list_available_desks(
        self,
        session: BookingSession,
        window: BookingWindow,
        floors: Optional[Sequence[FloorId]] = None,
        amenities: Optional[Sequence[AmenityId]] = None,
    ) -> List[DeskRecord]:
        """
        Query desks for the window.

        Returns every desk the service lists for the window, each with its
        availability status. Callers filter on DeskRecord.is_available.

        Raises:
            QueryError: On transport failure or unexpected response
        """
        self.logger.info(f"looking for desks on {window.date:%Y-%m-%d}")
        payload = [build_list_desks_operation(window, floors, amenities)]

        try:
            status, data = await self._post_json(session.client, GRAPHQL_BATCH_PATH, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise QueryError(f"Desk query failed: {e}") from e

        if status >= 400:
            raise QueryError("Desk query rejected", status=status)

        resources = extract_batch_result(data, BOOKABLE_RESOURCES_PATH, error_cls=QueryError)
        try:
            desks = [parse_desk(resource) for resource in resources or []]
        except (KeyError, TypeError) as e:
            raise QueryError(f"Malformed desk in response: {e}") from e

        self.logger.info(f"found {len(desks)} desks")
        return desks

    async def reserve(self, session: BookingSession, desk_id: int, window: BookingWindow) -> BookingId:
        """
        Book a desk for the window.

        Raises:
            ReservationError: If the service rejects the booking or returns no id
        """
        self.logger.info(
            f"BOOKING {desk_id} {format_timestamp(window.start)} {format_timestamp(window.end)}"
        )
        payload = [build_add_booking_operation(desk_id, window, self.timezone)]

        try:
            status, data = await self._post_json(session.client, GRAPHQL_BATCH_PATH, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ReservationError(f"Booking request failed: {e}") from e

        if status >= 400:
            raise ReservationError(f"Booking of desk {desk_id} rejected", status=status)

        created = extract_batch_result(data, ADD_BOOKING_PATH, error_cls=ReservationError)
        if not isinstance(created, dict):
            raise ReservationError(f"Unexpected booking response for desk {desk_id}: {str(created)[:200]}")
        booking_id = created.get("id")
        if not booking_id:
            raise ReservationError(f"No booking id returned for desk {desk_id}")

        return booking_id

    async def close(self):
        """Close every client created by login"""
        for client in self._clients:
            if not client.closed:
                await client.close()
        self._clients.clear()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
