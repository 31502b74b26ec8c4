import logging
from typing import Iterable, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.bay import Bay
from app.models.booking import Booking
from app.models.enums import ACTIVE_BOOKING_STATUSES
from app.schemas.bay import BayCreate, BayUpdate
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_BAY_NAMES = [
    "Bay-1-1", "Bay-1-2", "IB(1-2)-1", "Body-Shop",
    "Bay-2-2", "Bay-2-3", "IB(2-3)-1", "IB(2-3)-2",
    "Alignment-Rack", "Bay-3-2", "Bay-3-3",
    "IB(3-4)-1", "IB(3-4)-2", "IB(3-4)-3",
    "Bay-4-1", "Bay-4-2", "Bay-4-3",
    "Bay-5-1", "Bay-5-2", "Bay-5-3",
    "OB-1", "OB-2", "OB-3", "OB-4", "OB-5",
]


class CRUDBay(CRUDBase[Bay, BayCreate, BayUpdate]):
    async def get_by_key(self, db: AsyncSession, *, key: str) -> Optional[Bay]:
        result = await db.execute(select(Bay).where(Bay.key == key))
        return result.scalar_one_or_none()

    async def get_id_by_key(self, db: AsyncSession, *, key: str) -> Optional[int]:
        result = await db.execute(select(Bay.id).where(Bay.key == key))
        return result.scalar_one_or_none()

    async def get_all(self, db: AsyncSession) -> List[Bay]:
        result = await db.execute(select(Bay).order_by(Bay.id))
        return result.scalars().all()

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count(Bay.id)))
        return result.scalar_one()

    async def lock(self, db: AsyncSession, *, bay_ids: Iterable[int]) -> Dict[int, Bay]:
        """Take row locks on the given bays, in id order, for the rest of the transaction.

        Serialises concurrent writers that validate and then insert bookings on
        the same bay. Backends without row locks (SQLite) ignore FOR UPDATE.
        """
        ids = sorted(set(bay_ids))
        result = await db.execute(
            select(Bay).where(Bay.id.in_(ids)).order_by(Bay.id).with_for_update()
        )
        return {bay.id: bay for bay in result.scalars().all()}

    async def has_bookings(self, db: AsyncSession, *, bay_id: int, active_only: bool = False) -> bool:
        query = select(func.count(Booking.id)).where(Booking.bay_id == bay_id)
        if active_only:
            query = query.where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
        result = await db.execute(query)
        return result.scalar_one() > 0

    async def seed_if_empty(self, db: AsyncSession, *, waiting_list_key: str) -> int:
        """Insert the shop's default bays plus the waiting-list bay when the table is empty."""
        if await self.count(db) > 0:
            return 0
        now = utcnow()
        names = DEFAULT_BAY_NAMES + [waiting_list_key]
        db.add_all([Bay(key=name, name=name, created_at=now, updated_at=now) for name in names])
        await db.commit()
        logger.info(f"Seeded {len(names)} bays (waiting list key '{waiting_list_key}')")
        return len(names)


crud_bay = CRUDBay(Bay)
