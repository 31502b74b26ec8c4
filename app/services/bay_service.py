import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.core.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from app.models.bay import Bay
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


async def list_bays(db: AsyncSession) -> List[Bay]:
    return await crud.crud_bay.get_all(db)


async def get_bay(db: AsyncSession, *, bay_id: int) -> Bay:
    bay = await crud.crud_bay.get(db, id=bay_id)
    if bay is None:
        raise NotFoundError(f"Bay {bay_id} not found.")
    return bay


async def _ensure_key_free(db: AsyncSession, key: str, *, current_id: int | None = None) -> None:
    existing = await crud.crud_bay.get_by_key(db, key=key)
    if existing is not None and existing.id != current_id:
        raise InvalidInputError(f"A bay with key '{key}' already exists.")


async def create_bay(db: AsyncSession, *, bay_in: schemas.BayCreate) -> Bay:
    name = bay_in.name.strip()
    if not name:
        raise InvalidInputError("Bay name is required.")
    key = (bay_in.key or name).strip()
    await _ensure_key_free(db, key)
    now = utcnow()
    bay = await crud.crud_bay.create(
        db, obj_in={"name": name, "key": key, "created_at": now, "updated_at": now}
    )
    logger.info(f"Created bay {bay.id} ('{bay.key}')")
    return bay


async def update_bay(db: AsyncSession, *, bay_id: int, bay_in: schemas.BayUpdate) -> Bay:
    bay = await get_bay(db, bay_id=bay_id)
    update_data = bay_in.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in update_data:
        update_data["name"] = update_data["name"].strip()
        if not update_data["name"]:
            raise InvalidInputError("Bay name is required.")
    if "key" in update_data:
        update_data["key"] = update_data["key"].strip()
        await _ensure_key_free(db, update_data["key"], current_id=bay.id)
    update_data["updated_at"] = utcnow()
    return await crud.crud_bay.update(db, db_obj=bay, obj_in=update_data)


async def delete_bay(db: AsyncSession, *, bay_id: int) -> None:
    bay = await get_bay(db, bay_id=bay_id)
    if await crud.crud_bay.has_bookings(db, bay_id=bay.id, active_only=True):
        raise InvalidStateError(f"Bay '{bay.key}' still has active bookings.")
    if await crud.crud_bay.has_bookings(db, bay_id=bay.id):
        raise InvalidStateError(f"Bay '{bay.key}' is referenced by booking history.")
    await crud.crud_bay.remove(db, id=bay.id)
    logger.info(f"Deleted bay {bay_id}")
