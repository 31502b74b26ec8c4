from datetime import datetime, timedelta

import pytest

from app.core.exceptions import InvalidInputError
from app.models.booking import Booking
from app.models.enums import BookingStatus
from app.services import schedule_service
from app.utils.datetime_utils import utcnow

DAY = datetime(2025, 1, 10)


async def add_booking(db, shop, *, bay, start, end=None, status=BookingStatus.OPEN, created=None):
    booking = Booking(
        vehicle_id=shop.truck,
        bay_id=bay,
        start=start,
        end=end,
        status=status,
        created_at=created or start,
        updated_at=created or start,
    )
    db.add(booking)
    await db.commit()
    return booking


async def test_agenda_includes_bookings_straddling_the_window(db, shop):
    before = await add_booking(db, shop, bay=shop.bay_1, start=DAY - timedelta(hours=3), end=DAY + timedelta(hours=1))
    open_ended = await add_booking(db, shop, bay=shop.bay_2, start=DAY - timedelta(days=3))
    await add_booking(db, shop, bay=shop.bay_1, start=DAY + timedelta(days=1))  # starts at `to`
    await add_booking(db, shop, bay=shop.bay_1, start=DAY - timedelta(days=2), end=DAY - timedelta(days=1))

    result = await schedule_service.agenda(db, from_raw="2025-01-10T00:00:00Z", to_raw="2025-01-11T00:00:00Z")
    assert [b.id for b in result] == [open_ended.id, before.id]


async def test_agenda_rejects_inverted_window(db, shop):
    with pytest.raises(InvalidInputError):
        await schedule_service.agenda(db, from_raw="2025-01-11T00:00:00Z", to_raw="2025-01-10T00:00:00Z")


async def test_occupancy_ignores_finished_and_future_work(db, shop):
    await add_booking(db, shop, bay=shop.bay_1, start=DAY, end=DAY + timedelta(hours=8), status=BookingStatus.CANCELED)
    await add_booking(db, shop, bay=shop.bay_2, start=DAY + timedelta(hours=12))

    result = await schedule_service.occupancy(db, at_raw="2025-01-10T09:30:00Z")
    assert all(entry.booking is None for entry in result.bays)
    assert result.at.tzinfo is not None


async def test_occupancy_end_instant_is_inclusive(db, shop):
    booking = await add_booking(db, shop, bay=shop.bay_1, start=DAY, end=DAY + timedelta(hours=2))
    result = await schedule_service.occupancy(db, at_raw="2025-01-10T02:00:00Z")
    holder = {entry.bay_id: entry.booking for entry in result.bays}[shop.bay_1]
    assert holder.id == booking.id


async def test_occupancy_defaults_to_now(db, shop):
    booking = await add_booking(db, shop, bay=shop.bay_2, start=utcnow() - timedelta(hours=1))
    result = await schedule_service.occupancy(db)
    holder = {entry.bay_id: entry.booking for entry in result.bays}[shop.bay_2]
    assert holder.id == booking.id


async def test_ready_lists_closed_work_newest_first(db, shop):
    early = await add_booking(db, shop, bay=shop.bay_1, start=DAY, end=DAY + timedelta(hours=2), status=BookingStatus.CLOSED)
    late = await add_booking(db, shop, bay=shop.bay_2, start=DAY, end=DAY + timedelta(hours=5), status=BookingStatus.CLOSED)
    await add_booking(db, shop, bay=shop.bay_1, start=DAY, end=DAY + timedelta(hours=3), status=BookingStatus.CANCELED)
    await add_booking(db, shop, bay=shop.bay_1, start=DAY, end=DAY + timedelta(days=1), status=BookingStatus.CLOSED)

    result = await schedule_service.ready(db, from_raw="2025-01-10T00:00:00Z", to_raw="2025-01-11T00:00:00Z")
    assert [b.id for b in result] == [late.id, early.id]


async def test_waiting_list_range_filter(db, shop):
    inside = await add_booking(db, shop, bay=shop.waiting, start=DAY + timedelta(hours=4))
    outside = await add_booking(db, shop, bay=shop.waiting, start=DAY + timedelta(days=4), created=DAY + timedelta(days=5))
    await add_booking(db, shop, bay=shop.waiting, start=DAY, status=BookingStatus.CANCELED)
    await add_booking(db, shop, bay=shop.bay_1, start=DAY)

    everything = await schedule_service.waiting_list(db)
    assert [b.id for b in everything] == [outside.id, inside.id]

    ranged = await schedule_service.waiting_list(db, from_raw="2025-01-10T00:00:00Z", to_raw="2025-01-11T00:00:00Z")
    assert [b.id for b in ranged] == [inside.id]

    only_one_bound = await schedule_service.waiting_list(db, from_raw="2025-01-10T00:00:00Z")
    assert len(only_one_bound) == 2
