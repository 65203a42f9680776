"""
Centralized error handling for the reservation core.
Each core failure carries its HTTP status so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# HTTP status codes for known error categories
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


class ReservationError(Exception):
    """Base for terminal, synchronous failures of the reservation core. Never retried inside the core."""

    status_code = STATUS_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ReservationError):
    """Restaurant, table, reservation or waitlist entry absent or owned by another restaurant."""

    status_code = STATUS_NOT_FOUND


class InvalidWindowError(ReservationError):
    """Requested window lies outside operating hours (or restaurant hours are malformed)."""


class InvalidTableError(ReservationError):
    """Requested table does not belong to the restaurant."""


class CapacityExceededError(ReservationError):
    """Party size is larger than the table's capacity."""


class ConflictError(ReservationError):
    """Table unavailable for the window, including a lost commit race. Safe for the caller to retry."""

    status_code = STATUS_CONFLICT


class InvalidStateError(ReservationError):
    """Lifecycle transition not permitted from the current status."""


class DuplicateTableError(ReservationError):
    """Table number already used within the restaurant."""

    status_code = STATUS_CONFLICT


class CacheUnavailableError(Exception):
    """Cache backend unreachable. Raised by backends only; the coordinator absorbs it."""


def reservation_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from a core operation into an HTTPException.
    Core errors keep their message and status; anything else is a 500 without internals.
    """
    if isinstance(exc, ReservationError):
        return HTTPException(status_code=exc.status_code, detail=exc.message)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail="Internal server error")
