from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app import schemas, services
from app.db.session import get_db
from app.dependencies import get_current_user, require_admin, require_scheduler

router = APIRouter()


@router.get("", response_model=List[schemas.Bay])
async def list_bays(
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.bay_service.list_bays(db)


@router.get("/{bay_id}", response_model=schemas.Bay)
async def get_bay(
    bay_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.bay_service.get_bay(db, bay_id=bay_id)


@router.post("", response_model=schemas.Bay, status_code=status.HTTP_201_CREATED)
async def create_bay(
    bay_in: schemas.BayCreate,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
):
    return await services.bay_service.create_bay(db, bay_in=bay_in)


@router.put("/{bay_id}", response_model=schemas.Bay)
async def update_bay(
    bay_id: int,
    bay_in: schemas.BayUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
):
    return await services.bay_service.update_bay(db, bay_id=bay_id, bay_in=bay_in)


@router.delete("/{bay_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bay(
    bay_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_admin),
):
    """Remove a bay. Bays that still carry bookings are kept."""
    await services.bay_service.delete_bay(db, bay_id=bay_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
