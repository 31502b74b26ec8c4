from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app import crud, schemas, services
from app.core.config import settings
from app.db.session import get_db
from app.dependencies import (
    get_current_user, get_booking_effects, require_admin, require_closer, require_scheduler,
)
from app.models.enums import BookingStatus
from app.services.effects import BookingEffects

router = APIRouter()


@router.get("", response_model=List[schemas.Booking])
async def list_bookings(
    company_id: Optional[int] = None,
    vehicle_id: Optional[int] = None,
    bay_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    technician_id: Optional[int] = None,
    export: Optional[str] = Query(None, description="csv or excel to download instead of JSON"),
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    """List bookings, newest first. `export=csv` returns a CSV attachment."""
    want_csv = export is not None and export.lower() in ("csv", "excel")
    bookings = await crud.crud_booking.get_bookings(
        db,
        company_id=company_id,
        vehicle_id=vehicle_id,
        bay_id=bay_id,
        status=status,
        technician_id=technician_id,
        with_labels=want_csv,
    )
    if want_csv:
        content = services.export_service.bookings_to_csv(bookings, tz_name=settings.TIMEZONE)
        filename = services.export_service.export_filename()
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return bookings


@router.get("/agenda", response_model=List[schemas.Booking])
async def get_agenda(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    """Active bookings overlapping [from, to), waiting list excluded."""
    return await services.schedule_service.agenda(db, from_raw=from_, to_raw=to)


@router.get("/occupancy", response_model=schemas.OccupancyResponse)
async def get_occupancy(
    at: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.schedule_service.occupancy(db, at_raw=at)


@router.get("/ready", response_model=List[schemas.Booking])
async def get_ready(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    """Closed bookings whose end falls in [from, to), newest first."""
    return await services.schedule_service.ready(db, from_raw=from_, to_raw=to)


@router.get("/waiting-list", response_model=List[schemas.Booking])
async def get_waiting_list(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.schedule_service.waiting_list(db, from_raw=from_, to_raw=to)


@router.get("/{booking_id}", response_model=schemas.Booking)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.booking_service.get_booking(db, booking_id=booking_id)


@router.get("/{booking_id}/logs", response_model=List[schemas.AuditLog])
async def get_booking_logs(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.booking_service.list_booking_logs(db, booking_id=booking_id)


@router.post("", response_model=schemas.Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_in: schemas.BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
    effects: BookingEffects = Depends(get_booking_effects),
):
    return await services.booking_service.create_booking(
        db, booking_in=booking_in, user=current_user, effects=effects
    )


@router.put("/{booking_id}", response_model=schemas.Booking)
async def update_booking(
    booking_id: int,
    booking_in: schemas.BookingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
    effects: BookingEffects = Depends(get_booking_effects),
):
    return await services.booking_service.update_booking(
        db, booking_id=booking_id, booking_in=booking_in, user=current_user, effects=effects
    )


@router.put("/{booking_id}/cancel", response_model=schemas.Booking)
async def cancel_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
    effects: BookingEffects = Depends(get_booking_effects),
):
    return await services.booking_service.cancel_booking(
        db, booking_id=booking_id, user=current_user, effects=effects
    )


@router.put("/{booking_id}/close", response_model=schemas.Booking)
async def close_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_closer),
    effects: BookingEffects = Depends(get_booking_effects),
):
    return await services.booking_service.close_booking(
        db, booking_id=booking_id, user=current_user, effects=effects
    )


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_admin),
    effects: BookingEffects = Depends(get_booking_effects),
):
    await services.booking_service.delete_booking(
        db, booking_id=booking_id, user=current_user, effects=effects
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
