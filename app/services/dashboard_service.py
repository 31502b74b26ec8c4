import logging
from datetime import datetime, time, timedelta
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.core.config import settings
from app.utils.datetime_utils import localize, to_utc_naive, utcnow

logger = logging.getLogger(__name__)

TOP_LIMIT = 5


def local_day_bounds(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    """Naive UTC bounds of the shop-local calendar day containing `now`."""
    local_now = localize(now, tz_name)
    start_local = datetime.combine(local_now.date(), time.min, tzinfo=local_now.tzinfo)
    end_local = datetime.combine(local_now.date() + timedelta(days=1), time.min, tzinfo=local_now.tzinfo)
    return to_utc_naive(start_local), to_utc_naive(end_local)


def _entries(rows: List[Tuple[int, str, int]]) -> List[schemas.TopEntry]:
    return [schemas.TopEntry(id=i, name=name or "", count=count) for i, name, count in rows]


async def get_summary(db: AsyncSession) -> schemas.DashboardSummary:
    now = utcnow()
    day_start, day_end = local_day_bounds(now, settings.TIMEZONE)
    return schemas.DashboardSummary(
        open_bookings=await crud.crud_booking.count_active(db),
        today_bookings=await crud.crud_booking.count_starting_between(db, start=day_start, end=day_end),
        bays=await crud.crud_bay.count(db),
        timestamp=localize(now, settings.TIMEZONE),
        top=schemas.TopLists(
            technicians=_entries(await crud.crud_fleet.top_technicians(db, limit=TOP_LIMIT)),
            units=_entries(await crud.crud_fleet.top_vehicles(db, limit=TOP_LIMIT)),
            companies=_entries(await crud.crud_fleet.top_companies(db, limit=TOP_LIMIT)),
            bays=_entries(await crud.crud_fleet.top_bays(db, limit=TOP_LIMIT)),
        ),
    )
