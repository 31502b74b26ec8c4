"""Booking status machine.

    open ──> in_progress ──> closed
      │           │
      └───────────┴────────> canceled

`closed` and `canceled` are terminal. Moving into `in_progress` happens through
the generic update path; closing and canceling are explicit actions.
"""
import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from app.core.exceptions import InvalidInputError, InvalidStateError
from app.models.booking import Booking
from app.models.enums import BookingStatus, ACTIVE_BOOKING_STATUSES, TERMINAL_BOOKING_STATUSES
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.OPEN: frozenset({
        BookingStatus.OPEN, BookingStatus.IN_PROGRESS, BookingStatus.CLOSED, BookingStatus.CANCELED,
    }),
    BookingStatus.IN_PROGRESS: frozenset({
        BookingStatus.IN_PROGRESS, BookingStatus.CLOSED, BookingStatus.CANCELED,
    }),
    BookingStatus.CLOSED: frozenset(),
    BookingStatus.CANCELED: frozenset(),
}


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL_BOOKING_STATUSES


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in TRANSITIONS[current]


def initial_status(requested: Optional[BookingStatus]) -> BookingStatus:
    if requested is None:
        return BookingStatus.OPEN
    if requested not in ACTIVE_BOOKING_STATUSES:
        raise InvalidInputError(f"A booking cannot be created as '{requested.value}'.")
    return requested


def ensure_mutable(booking: Booking) -> None:
    if is_terminal(booking.status):
        raise InvalidStateError(f"Booking {booking.id} is already {booking.status.value}.")


def resolve_update_status(booking: Booking, requested: Optional[BookingStatus]) -> BookingStatus:
    """Status to store for a generic update. Terminal targets need close/cancel."""
    ensure_mutable(booking)
    if requested is None:
        return booking.status
    if requested in TERMINAL_BOOKING_STATUSES:
        raise InvalidInputError(f"Use the {requested.value} action instead of a field update.")
    if not can_transition(booking.status, requested):
        raise InvalidStateError(
            f"Booking {booking.id} cannot move from {booking.status.value} to {requested.value}."
        )
    return requested


def _finish(booking: Booking, target: BookingStatus, now: datetime, *, keep_end: bool) -> Booking:
    ensure_mutable(booking)
    if not can_transition(booking.status, target):
        raise InvalidStateError(
            f"Booking {booking.id} cannot move from {booking.status.value} to {target.value}."
        )
    previous = booking.status
    booking.status = target
    if booking.end is None or not keep_end:
        booking.end = now
    booking.updated_at = now
    logger.info(f"Booking {booking.id} moved from {previous.value} to {target.value}")
    return booking


def close(booking: Booking, now: Optional[datetime] = None) -> Booking:
    """Mark work as done. An end already on record is kept."""
    return _finish(booking, BookingStatus.CLOSED, now or utcnow(), keep_end=True)


def cancel(booking: Booking, now: Optional[datetime] = None) -> Booking:
    """Release the bay. The end is always stamped with the cancellation instant."""
    return _finish(booking, BookingStatus.CANCELED, now or utcnow(), keep_end=False)
