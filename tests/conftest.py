"""
Shared fixtures: in-memory database, seeded shop data, API client and tokens.
"""

import os

# Settings are read at import time, so configure before importing the app.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_BAYS", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from types import SimpleNamespace
from typing import AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base_class import Base
from app.db.session import get_db
from app.main import fastapi_app
from app.models import Bay, Company, Technician, Vehicle, UserRole
from app.security import create_access_token
from app.utils.datetime_utils import utcnow


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def shop(db: AsyncSession) -> SimpleNamespace:
    """Two working bays, the waiting list, one company with two units and two technicians."""
    now = utcnow()
    bay_1 = Bay(key="Bay-1-1", name="Bay-1-1", created_at=now, updated_at=now)
    bay_2 = Bay(key="Bay-1-2", name="Bay-1-2", created_at=now, updated_at=now)
    waiting = Bay(key="WaitingList", name="WaitingList", created_at=now, updated_at=now)
    company = Company(name="Acme Freight", contact="Dana Miles", phone="555-0100")
    truck = Vehicle(company=company, plate="TRK-100", vin="1FUJGLDR0CLBP1234", make="Freightliner", model="Cascadia")
    trailer = Vehicle(company=company, plate=None, vin="1GRAA0621KB700001", make="Great Dane", model="Champion")
    alice = Technician(name="Alice Moreno")
    bob = Technician(name="Bob Chen")
    db.add_all([bay_1, bay_2, waiting, company, truck, trailer, alice, bob])
    await db.commit()
    return SimpleNamespace(
        bay_1=bay_1.id,
        bay_2=bay_2.id,
        waiting=waiting.id,
        company=company.id,
        truck=truck.id,
        trailer=trailer.id,
        alice=alice.id,
        bob=bob.id,
    )


# ============================================================================
# MOCK FIXTURES
# ============================================================================

@pytest.fixture
def mock_telegram():
    """Telegram client stand-in."""
    telegram = MagicMock()
    telegram.notify = AsyncMock(return_value=True)
    telegram.update = MagicMock()
    return telegram


@pytest.fixture
def mock_broadcaster():
    broadcaster = MagicMock()
    broadcaster.publish = MagicMock(return_value=True)
    return broadcaster


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
async def client(session_factory, mock_telegram, mock_broadcaster) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.state.telegram = mock_telegram
    fastapi_app.state.broadcaster = mock_broadcaster
    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


def auth_headers(role: UserRole = UserRole.ADMIN, user_id: int = 1) -> Dict[str, str]:
    token = create_access_token(user_id=user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return auth_headers(UserRole.ADMIN, user_id=1)


@pytest.fixture
def dispatcher_headers() -> Dict[str, str]:
    return auth_headers(UserRole.DISPATCHER, user_id=2)


@pytest.fixture
def mechanic_headers() -> Dict[str, str]:
    return auth_headers(UserRole.MECHANIC, user_id=3)
