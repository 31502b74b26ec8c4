"""Booking writes: admission control, lifecycle actions and their side effects.

Every create or update takes a row lock on the bay (or both bays, in id order,
when a booking moves) before reading the bay's active bookings, so the
validate-then-write sequence for one bay is serialised across workers.
Update, cancel, close and delete first lock the booking row itself and read
its current status from that locked row. Locks are always taken in the order
booking, bays, booking-number counter.
"""
import enum
import logging
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.core.config import settings
from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.bay import Bay
from app.models.booking import Booking
from app.models.enums import BookingEvent
from app.models.fleet import Technician
from app.services import booking_lifecycle, notification_service
from app.services.booking_validation import check_interval, validate_booking_conflict
from app.services.effects import BookingEffects
from app.utils.datetime_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

BOOKING_ENTITY = "booking"
TECHNICIAN_ENTITY = "technician"

_TRACKED_FIELDS = (
    "vehicle_id", "bay_id", "company_id", "start", "end", "status",
    "title", "complaint", "description", "notes", "fullbay_service_id",
)


def _audit_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    return value


async def _get_or_404(db: AsyncSession, booking_id: int, *, for_update: bool = False) -> Booking:
    booking = await crud.crud_booking.get_booking(db, booking_id, for_update=for_update)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found.")
    return booking


async def _resolve_references(db: AsyncSession, booking_in: schemas.BookingBase) -> List[Technician]:
    if await crud.crud_fleet.get_vehicle(db, booking_in.vehicle_id) is None:
        raise NotFoundError(f"Vehicle {booking_in.vehicle_id} not found.")
    if booking_in.company_id is not None and await crud.crud_fleet.get_company(db, booking_in.company_id) is None:
        raise NotFoundError(f"Company {booking_in.company_id} not found.")
    technicians = await crud.crud_fleet.get_technicians(db, booking_in.technician_ids)
    if len(technicians) != len(booking_in.technician_ids):
        found = {t.id for t in technicians}
        missing = [i for i in booking_in.technician_ids if i not in found]
        raise InvalidInputError(f"Unknown technician ids: {missing}")
    return technicians


async def _lock_target_bay(db: AsyncSession, *, bay_id: int, also: Optional[int] = None) -> Bay:
    bay_ids = {bay_id} if also is None else {bay_id, also}
    bays = await crud.crud_bay.lock(db, bay_ids=bay_ids)
    bay = bays.get(bay_id)
    if bay is None:
        raise NotFoundError(f"Bay {bay_id} not found.")
    return bay


def is_waiting_list(bay: Bay) -> bool:
    return bay.key == settings.WAITING_LIST_BAY_KEY


async def _admit(db: AsyncSession, *, bay: Bay, candidate: Any, exclude_id: Optional[int] = None) -> None:
    """Run the conflict check for `candidate` unless it goes to the waiting list."""
    check_interval(candidate.start, candidate.end)
    if is_waiting_list(bay):
        logger.debug(f"Bay {bay.id} is the waiting list, skipping conflict check")
        return
    existing = await crud.crud_booking.get_active_bookings_for_bay(db, bay_id=bay.id, exclude_id=exclude_id)
    validate_booking_conflict(candidate, existing)


async def _telegram_template(db: AsyncSession) -> str:
    row = await crud.crud_settings.get_settings(db)
    return row.telegram_template if row else ""


async def _after_commit(
    db: AsyncSession, booking_id: int, *, event: BookingEvent, kind: str, effects: Optional[BookingEffects]
) -> Booking:
    booking = await crud.crud_booking.get_booking(db, booking_id, with_labels=True)
    if effects is None:
        return booking
    effects.publish(event.value, schemas.Booking.model_validate(booking))
    try:
        message = notification_service.compose_message(
            kind, booking, template=await _telegram_template(db), tz_name=settings.TIMEZONE
        )
    except Exception as e:
        logger.error(f"Could not compose notification for booking {booking_id}: {e}", exc_info=True)
        return booking
    effects.notify(message)
    return booking


async def create_booking(
    db: AsyncSession,
    *,
    booking_in: schemas.BookingCreate,
    user: schemas.CurrentUser,
    effects: Optional[BookingEffects] = None,
) -> Booking:
    status = booking_lifecycle.initial_status(booking_in.status)
    technicians = await _resolve_references(db, booking_in)

    bay = await _lock_target_bay(db, bay_id=booking_in.bay_id)
    now = utcnow()
    booking = Booking(
        vehicle_id=booking_in.vehicle_id,
        bay_id=booking_in.bay_id,
        company_id=booking_in.company_id,
        start=booking_in.start,
        end=booking_in.end,
        status=status,
        title=booking_in.title,
        complaint=booking_in.complaint,
        description=booking_in.description,
        notes=booking_in.notes,
        fullbay_service_id=booking_in.fullbay_service_id,
        created_by=user.id,
        created_at=now,
        updated_at=now,
    )
    await _admit(db, bay=bay, candidate=booking)

    booking.number = await crud.crud_booking.next_booking_number(db)
    booking.technicians = technicians
    db.add(booking)
    await db.flush()

    crud.crud_audit_log.add_entry(
        db,
        action=BookingEvent.CREATED.value,
        entity=BOOKING_ENTITY,
        entity_id=booking.id,
        user_id=user.id,
        meta={
            "number": booking.number,
            "vehicle_id": booking.vehicle_id,
            "bay_id": booking.bay_id,
            "company_id": booking.company_id,
            "start": _audit_value(booking.start),
            "end": _audit_value(booking.end),
            "status": booking.status.value,
        },
    )
    for technician in technicians:
        crud.crud_audit_log.add_entry(
            db,
            action=BookingEvent.ASSIGNED.value,
            entity=TECHNICIAN_ENTITY,
            entity_id=technician.id,
            user_id=user.id,
            meta={"booking_id": booking.id, "number": booking.number},
        )
    await db.commit()
    logger.info(f"Created booking {booking.number} (id={booking.id}) on bay {bay.key}")

    return await _after_commit(
        db, booking.id, event=BookingEvent.CREATED, kind=notification_service.CREATED, effects=effects
    )


async def update_booking(
    db: AsyncSession,
    *,
    booking_id: int,
    booking_in: schemas.BookingUpdate,
    user: schemas.CurrentUser,
    effects: Optional[BookingEffects] = None,
) -> Booking:
    booking = await _get_or_404(db, booking_id, for_update=True)
    status = booking_lifecycle.resolve_update_status(booking, booking_in.status)
    technicians = await _resolve_references(db, booking_in)

    bay = await _lock_target_bay(db, bay_id=booking_in.bay_id, also=booking.bay_id)
    candidate = SimpleNamespace(
        bay_id=booking_in.bay_id, start=booking_in.start, end=booking_in.end, status=status
    )
    await _admit(db, bay=bay, candidate=candidate, exclude_id=booking.id)

    new_values: Dict[str, Any] = {
        "vehicle_id": booking_in.vehicle_id,
        "bay_id": booking_in.bay_id,
        "company_id": booking_in.company_id,
        "start": booking_in.start,
        "end": booking_in.end,
        "status": status,
        "title": booking_in.title,
        "complaint": booking_in.complaint,
        "description": booking_in.description,
        "notes": booking_in.notes,
        "fullbay_service_id": booking_in.fullbay_service_id,
    }
    diff: Dict[str, Any] = {}
    for field in _TRACKED_FIELDS:
        old, new = getattr(booking, field), new_values[field]
        if old != new:
            diff[field] = {"from": _audit_value(old), "to": _audit_value(new)}

    old_tech_ids = booking.technician_ids
    new_tech_ids = [t.id for t in technicians]
    added = [i for i in new_tech_ids if i not in old_tech_ids]
    removed = [i for i in old_tech_ids if i not in new_tech_ids]
    if added:
        diff["technicians_added"] = added
    if removed:
        diff["technicians_removed"] = removed

    rescheduled = notification_service.times_changed(
        booking.start, booking.end, booking_in.start, booking_in.end
    )

    for field, value in new_values.items():
        setattr(booking, field, value)
    booking.technicians = technicians
    booking.updated_at = utcnow()

    crud.crud_audit_log.add_entry(
        db,
        action=BookingEvent.UPDATED.value,
        entity=BOOKING_ENTITY,
        entity_id=booking.id,
        user_id=user.id,
        meta=diff,
    )
    for technician_id in added:
        crud.crud_audit_log.add_entry(
            db,
            action=BookingEvent.ASSIGNED.value,
            entity=TECHNICIAN_ENTITY,
            entity_id=technician_id,
            user_id=user.id,
            meta={"booking_id": booking.id, "number": booking.number},
        )
    await db.commit()
    logger.info(f"Updated booking {booking.number} (id={booking.id}), changed: {sorted(diff)}")

    kind = notification_service.RESCHEDULED if rescheduled else notification_service.UPDATED
    return await _after_commit(db, booking.id, event=BookingEvent.UPDATED, kind=kind, effects=effects)


async def cancel_booking(
    db: AsyncSession, *, booking_id: int, user: schemas.CurrentUser, effects: Optional[BookingEffects] = None
) -> Booking:
    booking = await _get_or_404(db, booking_id, for_update=True)
    booking_lifecycle.cancel(booking)
    crud.crud_audit_log.add_entry(
        db,
        action=BookingEvent.CANCELED.value,
        entity=BOOKING_ENTITY,
        entity_id=booking.id,
        user_id=user.id,
        meta={"number": booking.number, "end": _audit_value(booking.end)},
    )
    await db.commit()
    return await _after_commit(
        db, booking.id, event=BookingEvent.CANCELED, kind=notification_service.CANCELED, effects=effects
    )


async def close_booking(
    db: AsyncSession, *, booking_id: int, user: schemas.CurrentUser, effects: Optional[BookingEffects] = None
) -> Booking:
    booking = await _get_or_404(db, booking_id, for_update=True)
    booking_lifecycle.close(booking)
    crud.crud_audit_log.add_entry(
        db,
        action=BookingEvent.CLOSED.value,
        entity=BOOKING_ENTITY,
        entity_id=booking.id,
        user_id=user.id,
        meta={"number": booking.number, "end": _audit_value(booking.end)},
    )
    await db.commit()
    return await _after_commit(
        db, booking.id, event=BookingEvent.CLOSED, kind=notification_service.CLOSED, effects=effects
    )


async def delete_booking(
    db: AsyncSession, *, booking_id: int, user: schemas.CurrentUser, effects: Optional[BookingEffects] = None
) -> None:
    booking = await _get_or_404(db, booking_id, for_update=True)
    number = booking.number
    await crud.crud_booking.delete_booking(db, booking=booking)
    crud.crud_audit_log.add_entry(
        db,
        action=BookingEvent.DELETED.value,
        entity=BOOKING_ENTITY,
        entity_id=booking_id,
        user_id=user.id,
        meta={"number": number},
    )
    await db.commit()
    if effects is not None:
        effects.publish(BookingEvent.DELETED.value, {"id": booking_id, "number": number})


async def get_booking(db: AsyncSession, *, booking_id: int) -> Booking:
    return await _get_or_404(db, booking_id)


async def list_booking_logs(db: AsyncSession, *, booking_id: int):
    await _get_or_404(db, booking_id)
    return await crud.crud_audit_log.get_entries(db, entity=BOOKING_ENTITY, entity_id=booking_id)
