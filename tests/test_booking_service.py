from datetime import datetime

import pytest
from sqlalchemy import update

from app import crud
from app.core.exceptions import InvalidStateError
from app.models.booking import Booking
from app.models.enums import BookingEvent, BookingStatus, UserRole
from app.schemas import BookingCreate, BookingUpdate, CurrentUser
from app.services import booking_service

DISPATCHER = CurrentUser(id=7, role=UserRole.DISPATCHER)
START = datetime(2025, 1, 10, 9)


async def open_booking(db, shop) -> Booking:
    return await booking_service.create_booking(
        db,
        booking_in=BookingCreate(vehicle_id=shop.truck, bay_id=shop.bay_1, start=START),
        user=DISPATCHER,
    )


async def cancel_elsewhere(db, booking_id: int) -> None:
    """Commit a cancel without touching the copy this session already holds."""
    await db.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .values(status=BookingStatus.CANCELED, end=datetime(2025, 1, 10, 10))
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def test_update_sees_cancel_committed_after_first_read(db, shop):
    booking = await open_booking(db, shop)
    assert booking.status == BookingStatus.OPEN
    await cancel_elsewhere(db, booking.id)

    with pytest.raises(InvalidStateError):
        await booking_service.update_booking(
            db,
            booking_id=booking.id,
            booking_in=BookingUpdate(
                vehicle_id=shop.truck, bay_id=shop.bay_1, start=START, status=BookingStatus.IN_PROGRESS
            ),
            user=DISPATCHER,
        )
    await db.rollback()

    stored = await crud.crud_booking.get_booking(db, booking.id, for_update=True)
    assert stored.status == BookingStatus.CANCELED


async def test_close_after_concurrent_cancel_is_rejected(db, shop):
    booking = await open_booking(db, shop)
    await cancel_elsewhere(db, booking.id)

    with pytest.raises(InvalidStateError):
        await booking_service.close_booking(db, booking_id=booking.id, user=DISPATCHER)
    await db.rollback()

    entries = await crud.crud_audit_log.get_entries(
        db, entity=booking_service.BOOKING_ENTITY, entity_id=booking.id
    )
    assert BookingEvent.CLOSED.value not in [entry.action for entry in entries]
