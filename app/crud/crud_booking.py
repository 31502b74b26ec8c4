from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import and_, or_, func
from sqlalchemy.orm import selectinload
from typing import List, Optional
from datetime import datetime
import logging

from app.models.booking import Booking, Counter, booking_technicians
from app.models.enums import BookingStatus, ACTIVE_BOOKING_STATUSES

logger = logging.getLogger(__name__)

BOOKING_NUMBER_COUNTER = "booking_number"

# Labels needed by exports and notifications
_DISPLAY_OPTIONS = (
    selectinload(Booking.bay),
    selectinload(Booking.vehicle),
    selectinload(Booking.company),
)


async def get_booking(
    db: AsyncSession, booking_id: int, *, with_labels: bool = False, for_update: bool = False
) -> Optional[Booking]:
    query = select(Booking).where(Booking.id == booking_id)
    if for_update:
        # Row lock held until commit; stale copies in the identity map are overwritten
        query = query.with_for_update().execution_options(populate_existing=True)
    if with_labels:
        # Refresh references that may have been reassigned by id in this session
        query = query.options(*_DISPLAY_OPTIONS).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_bookings(
    db: AsyncSession,
    *,
    company_id: Optional[int] = None,
    vehicle_id: Optional[int] = None,
    bay_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    technician_id: Optional[int] = None,
    with_labels: bool = False,
) -> List[Booking]:
    """Filtered booking list, newest first."""
    query = select(Booking)
    if company_id is not None:
        query = query.where(Booking.company_id == company_id)
    if vehicle_id is not None:
        query = query.where(Booking.vehicle_id == vehicle_id)
    if bay_id is not None:
        query = query.where(Booking.bay_id == bay_id)
    if status is not None:
        query = query.where(Booking.status == status)
    if technician_id is not None:
        query = query.where(
            Booking.id.in_(
                select(booking_technicians.c.booking_id).where(
                    booking_technicians.c.technician_id == technician_id
                )
            )
        )
    if with_labels:
        query = query.options(*_DISPLAY_OPTIONS)
    query = query.order_by(Booking.created_at.desc(), Booking.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_active_bookings_for_bay(
    db: AsyncSession, *, bay_id: int, exclude_id: Optional[int] = None
) -> List[Booking]:
    query = select(Booking).where(
        Booking.bay_id == bay_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
    )
    if exclude_id is not None:
        query = query.where(Booking.id != exclude_id)
    result = await db.execute(query)
    return result.scalars().all()


async def get_agenda(
    db: AsyncSession, *, start: datetime, end: datetime, exclude_bay_id: Optional[int] = None
) -> List[Booking]:
    """Active bookings reaching into [start, end)."""
    query = select(Booking).where(
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        Booking.start < end,
        or_(Booking.end.is_(None), Booking.end >= start),
    )
    if exclude_bay_id is not None:
        query = query.where(Booking.bay_id != exclude_bay_id)
    result = await db.execute(query.order_by(Booking.start, Booking.id))
    return result.scalars().all()


async def get_occupying_bookings(db: AsyncSession, *, at: datetime) -> List[Booking]:
    """Active bookings covering the instant `at`, oldest start first."""
    query = select(Booking).where(
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        Booking.start <= at,
        or_(Booking.end.is_(None), Booking.end >= at),
    )
    result = await db.execute(query.order_by(Booking.start, Booking.id))
    return result.scalars().all()


async def get_ready_bookings(db: AsyncSession, *, start: datetime, end: datetime) -> List[Booking]:
    query = select(Booking).where(
        Booking.status == BookingStatus.CLOSED,
        Booking.end.is_not(None),
        Booking.end >= start,
        Booking.end < end,
    )
    result = await db.execute(query.order_by(Booking.end.desc(), Booking.id.desc()))
    return result.scalars().all()


async def get_waiting_list(
    db: AsyncSession, *, bay_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> List[Booking]:
    query = select(Booking).where(
        Booking.bay_id == bay_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
    )
    if start is not None and end is not None:
        query = query.where(and_(Booking.start >= start, Booking.start < end))
    result = await db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
    return result.scalars().all()


async def count_active(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Booking.id)).where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
    )
    return result.scalar_one()


async def count_starting_between(db: AsyncSession, *, start: datetime, end: datetime) -> int:
    result = await db.execute(
        select(func.count(Booking.id)).where(Booking.start >= start, Booking.start < end)
    )
    return result.scalar_one()


async def next_booking_number(db: AsyncSession) -> str:
    """Advance the booking counter inside the caller's transaction and format it."""
    result = await db.execute(
        select(Counter).where(Counter.name == BOOKING_NUMBER_COUNTER).with_for_update()
    )
    counter = result.scalar_one_or_none()
    if counter is None:
        counter = Counter(name=BOOKING_NUMBER_COUNTER, seq=0)
        db.add(counter)
    counter.seq += 1
    await db.flush()
    return f"{counter.seq:06d}"


async def delete_booking(db: AsyncSession, *, booking: Booking) -> None:
    await db.delete(booking)
    await db.flush()
    logger.info(f"Deleted booking id {booking.id}")
