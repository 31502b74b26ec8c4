"""Calendar reads: agenda, occupancy, ready list and waiting list.

They use the same notion of "active" as admission control, but the agenda and
occupancy bounds are inclusive on the end side (a booking ending exactly at
`from` still shows in the agenda) since they report rather than admit.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.core.config import settings
from app.core.exceptions import InvalidInputError
from app.models.booking import Booking
from app.utils.datetime_utils import parse_timestamp, utcnow

logger = logging.getLogger(__name__)


def _parse_range(from_raw: Optional[str], to_raw: Optional[str]) -> tuple[datetime, datetime]:
    start = parse_timestamp(from_raw, field="from")
    end = parse_timestamp(to_raw, field="to")
    if end < start:
        raise InvalidInputError("'to' must not precede 'from'")
    return start, end


async def waiting_list_bay_id(db: AsyncSession) -> Optional[int]:
    return await crud.crud_bay.get_id_by_key(db, key=settings.WAITING_LIST_BAY_KEY)


async def agenda(db: AsyncSession, *, from_raw: Optional[str], to_raw: Optional[str]) -> List[Booking]:
    start, end = _parse_range(from_raw, to_raw)
    return await crud.crud_booking.get_agenda(
        db, start=start, end=end, exclude_bay_id=await waiting_list_bay_id(db)
    )


async def occupancy(db: AsyncSession, *, at_raw: Optional[str] = None) -> schemas.OccupancyResponse:
    """Which active booking holds each bay at one instant (default: now)."""
    at = parse_timestamp(at_raw, field="at") if at_raw else utcnow()
    wl_id = await waiting_list_bay_id(db)

    holders: Dict[int, Booking] = {}
    for booking in await crud.crud_booking.get_occupying_bookings(db, at=at):
        # Later starts win if the exclusivity invariant was ever broken
        holders[booking.bay_id] = booking

    bays = []
    for bay in await crud.crud_bay.get_all(db):
        if bay.id == wl_id:
            continue
        holder = holders.get(bay.id)
        bays.append(
            schemas.BayOccupancy(
                bay_id=bay.id,
                bay_key=bay.key,
                bay_name=bay.name,
                booking=schemas.Booking.model_validate(holder) if holder else None,
            )
        )
    return schemas.OccupancyResponse(at=at, bays=bays)


async def ready(db: AsyncSession, *, from_raw: Optional[str], to_raw: Optional[str]) -> List[Booking]:
    start, end = _parse_range(from_raw, to_raw)
    return await crud.crud_booking.get_ready_bookings(db, start=start, end=end)


async def waiting_list(
    db: AsyncSession, *, from_raw: Optional[str] = None, to_raw: Optional[str] = None
) -> List[Booking]:
    wl_id = await waiting_list_bay_id(db)
    if wl_id is None:
        logger.warning(f"No bay with key '{settings.WAITING_LIST_BAY_KEY}', waiting list is empty")
        return []
    start = end = None
    if from_raw and to_raw:
        start, end = _parse_range(from_raw, to_raw)
    return await crud.crud_booking.get_waiting_list(db, bay_id=wl_id, start=start, end=end)
