import asyncio
import random
import sys
import os

from faker import Faker
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

# Make sure paths are correct for script execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.crud import crud_bay
from app.db.session import AsyncSessionLocal
from app.models.enums import UserRole, VehicleType
from app.models.fleet import Company, Vehicle, Technician
from app.security import create_access_token

faker = Faker()

NUM_COMPANIES = 8
UNITS_PER_COMPANY = (2, 6)
NUM_TECHNICIANS = 10
TRUCK_MAKES = ["Freightliner", "Kenworth", "Peterbilt", "Volvo", "International", "Mack"]
TRAILER_MAKES = ["Great Dane", "Utility", "Wabash", "Hyundai Translead"]


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count(model.id)))
    return result.scalar_one()


async def seed_companies_and_units(db: AsyncSession) -> None:
    if await _count(db, Company) > 0:
        print("Companies already present, skipping.")
        return
    for _ in range(NUM_COMPANIES):
        company = Company(
            name=faker.unique.company(),
            contact=faker.name(),
            phone=faker.phone_number(),
        )
        db.add(company)
        await db.flush()
        for _ in range(random.randint(*UNITS_PER_COMPANY)):
            vehicle_type = random.choice(list(VehicleType))
            makes = TRUCK_MAKES if vehicle_type == VehicleType.TRUCK else TRAILER_MAKES
            db.add(
                Vehicle(
                    company_id=company.id,
                    type=vehicle_type,
                    vin=faker.unique.bothify(text="1??#############").upper(),
                    plate=faker.unique.license_plate(),
                    make=random.choice(makes),
                    model=faker.bothify(text="??-###").upper(),
                    year=random.randint(2008, 2025),
                )
            )
    await db.commit()
    print(f"Seeded {NUM_COMPANIES} companies with units.")


async def seed_technicians(db: AsyncSession) -> None:
    if await _count(db, Technician) > 0:
        print("Technicians already present, skipping.")
        return
    for _ in range(NUM_TECHNICIANS):
        db.add(Technician(name=faker.name(), phone=faker.phone_number(), email=faker.email()))
    await db.commit()
    print(f"Seeded {NUM_TECHNICIANS} technicians.")


async def main() -> None:
    async with AsyncSessionLocal() as db:
        seeded = await crud_bay.seed_if_empty(db, waiting_list_key=settings.WAITING_LIST_BAY_KEY)
        print(f"Bays seeded: {seeded}")
        await seed_companies_and_units(db)
        await seed_technicians(db)

    print("--- Development tokens ---")
    for user_id, role in enumerate(UserRole, start=1):
        print(f"{role.value:<11} {create_access_token(user_id=user_id, role=role)}")


if __name__ == "__main__":
    asyncio.run(main())
