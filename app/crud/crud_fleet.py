"""Read-only lookups of companies, vehicles and technicians referenced by bookings."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Dict, Iterable, List, Optional, Tuple

from app.models.bay import Bay
from app.models.booking import Booking, booking_technicians
from app.models.fleet import Company, Vehicle, Technician


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Optional[Vehicle]:
    return await db.get(Vehicle, vehicle_id)


async def get_company(db: AsyncSession, company_id: int) -> Optional[Company]:
    return await db.get(Company, company_id)


async def get_technicians(db: AsyncSession, technician_ids: Iterable[int]) -> List[Technician]:
    ids = list(technician_ids)
    if not ids:
        return []
    result = await db.execute(select(Technician).where(Technician.id.in_(ids)))
    found = {tech.id: tech for tech in result.scalars().all()}
    # Keep the caller's order
    return [found[i] for i in ids if i in found]


async def get_technician_names(db: AsyncSession, technician_ids: Iterable[int]) -> Dict[int, str]:
    ids = list(set(technician_ids))
    if not ids:
        return {}
    result = await db.execute(select(Technician.id, Technician.name).where(Technician.id.in_(ids)))
    return {row.id: row.name for row in result}


async def top_technicians(db: AsyncSession, *, limit: int = 5) -> List[Tuple[int, str, int]]:
    count = func.count(booking_technicians.c.booking_id)
    query = (
        select(Technician.id, Technician.name, count.label("count"))
        .join(booking_technicians, booking_technicians.c.technician_id == Technician.id)
        .group_by(Technician.id, Technician.name)
        .order_by(count.desc(), Technician.id)
        .limit(limit)
    )
    result = await db.execute(query)
    return [(row.id, row.name, row.count) for row in result]


async def top_vehicles(db: AsyncSession, *, limit: int = 5) -> List[Tuple[int, str, int]]:
    count = func.count(Booking.id)
    query = (
        select(Vehicle.id, Vehicle.plate, Vehicle.vin, count.label("count"))
        .join(Booking, Booking.vehicle_id == Vehicle.id)
        .group_by(Vehicle.id, Vehicle.plate, Vehicle.vin)
        .order_by(count.desc(), Vehicle.id)
        .limit(limit)
    )
    result = await db.execute(query)
    return [(row.id, row.plate or row.vin or "", row.count) for row in result]


async def top_companies(db: AsyncSession, *, limit: int = 5) -> List[Tuple[int, str, int]]:
    count = func.count(Booking.id)
    query = (
        select(Company.id, Company.name, count.label("count"))
        .join(Booking, Booking.company_id == Company.id)
        .group_by(Company.id, Company.name)
        .order_by(count.desc(), Company.id)
        .limit(limit)
    )
    result = await db.execute(query)
    return [(row.id, row.name, row.count) for row in result]


async def top_bays(db: AsyncSession, *, limit: int = 5) -> List[Tuple[int, str, int]]:
    count = func.count(Booking.id)
    query = (
        select(Bay.id, Bay.name, count.label("count"))
        .join(Booking, Booking.bay_id == Bay.id)
        .group_by(Bay.id, Bay.name)
        .order_by(count.desc(), Bay.id)
        .limit(limit)
    )
    result = await db.execute(query)
    return [(row.id, row.name, row.count) for row in result]
