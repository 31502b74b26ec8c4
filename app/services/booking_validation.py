"""Bay admission rules: interval overlap and the single-occupancy check."""
from datetime import datetime
from typing import Iterable, Optional, Protocol

from app.core.exceptions import BookingConflictError, InvalidInputError
from app.models.enums import BookingStatus, TERMINAL_BOOKING_STATUSES

# Any overlap disqualifies. Bays used to carry a capacity; it is fixed at one now.
BAY_OCCUPANCY_LIMIT = 1


class BookingSlot(Protocol):
    bay_id: int
    start: datetime
    end: Optional[datetime]
    status: BookingStatus


def overlaps(
    a_start: datetime, a_end: Optional[datetime], b_start: datetime, b_end: Optional[datetime]
) -> bool:
    """Half-open intersection test for [a_start, a_end) and [b_start, b_end).

    A missing end is unbounded, so an open-ended interval reaches past every
    real instant. Touching boundaries do not overlap.
    """
    if a_end is not None and not b_start < a_end:
        return False
    if b_end is not None and not a_start < b_end:
        return False
    return True


def check_interval(start: datetime, end: Optional[datetime]) -> None:
    if end is not None and end < start:
        raise InvalidInputError("Booking end must not precede its start.")


def validate_booking_conflict(candidate: BookingSlot, existing: Iterable[BookingSlot]) -> None:
    """Raise BookingConflictError when `candidate` would share its bay with an active booking.

    `existing` should already be limited to the candidate's bay and must not
    contain the candidate's own stored row. Waiting-list candidates are never
    passed in here.
    """
    check_interval(candidate.start, candidate.end)

    conflicts = 0
    for other in existing:
        if other.status in TERMINAL_BOOKING_STATUSES:
            continue
        if other.bay_id != candidate.bay_id:
            continue
        if overlaps(candidate.start, candidate.end, other.start, other.end):
            conflicts += 1
            if conflicts >= BAY_OCCUPANCY_LIMIT:
                raise BookingConflictError()
