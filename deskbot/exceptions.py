"""
Exception hierarchy for the desk booking bot.

AuthError aborts a whole run. QueryError, ReservationError and
NoDesksAvailable only fail the date being processed.
"""

from typing import Any, List, Optional


class DeskBotError(Exception):
    """Base class for all bot errors"""


class ConfigurationError(DeskBotError):
    """Invalid preferences, credentials or work hours"""


class AuthError(DeskBotError):
    """Login rejected or login request could not be completed"""


class ServiceError(DeskBotError):
    """Error reported by the booking service for a single request"""

    def __init__(self, message: str, status: Optional[int] = None, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.status = status
        self.errors = errors or []

    def __str__(self):
        message = super().__str__()
        if self.status is not None:
            message = f"{message} (HTTP {self.status})"
        if self.errors:
            message = f"{message}: {self.errors}"
        return message


class QueryError(ServiceError):
    """Desk availability query failed (transport or unexpected response)"""


class ReservationError(ServiceError):
    """Desk could not be booked"""


class NoDesksAvailable(DeskBotError):
    """No available desk for the requested window"""
