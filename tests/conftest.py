from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachcal.api.deps import get_now
from coachcal.database import Base, build_engine, get_db
from coachcal.main import app
from coachcal.models.coach import Client, Coach
from coachcal.models.organization import Organization

# Friday 1 March 2024, 7:00 AM in New York
FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

test_engine = build_engine("sqlite+aiosqlite://")
test_session = async_sessionmaker(test_engine, expire_on_commit=False)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_now] = lambda: FIXED_NOW


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the same in-memory database as the app."""
    return test_session


@pytest.fixture
def pin_now():
    """Pin the request clock to another instant for one test."""

    def _pin(instant: datetime) -> None:
        app.dependency_overrides[get_now] = lambda: instant

    yield _pin
    app.dependency_overrides[get_now] = lambda: FIXED_NOW


@pytest.fixture
async def coach() -> Coach:
    coach = Coach(id=1, name="Dana Reyes", email="dana@example.com")
    async with test_session() as session:
        session.add(coach)
        await session.commit()
    return coach


@pytest.fixture
async def student(coach: Coach) -> Client:
    client = Client(id=1, coach_id=coach.id, name="Sam Park", email="sam@example.com")
    async with test_session() as session:
        session.add(client)
        await session.commit()
    return client


@pytest.fixture
async def organization() -> Organization:
    org = Organization(id=1, name="Riverside Tennis")
    async with test_session() as session:
        session.add(org)
        await session.commit()
    return org
