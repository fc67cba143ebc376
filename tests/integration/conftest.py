"""Integration test fixtures with a real (SQLite file) database."""

from collections.abc import AsyncGenerator
from datetime import date, time
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from attendance_payroll.api.app import create_app
from attendance_payroll.api.dependencies import get_db_session
from attendance_payroll.calculators.types import CompensationProfile
from attendance_payroll.database import create_schema, make_session_factory, session_scope
from attendance_payroll.providers.sql import SqlAlchemyEmployeeDirectory

# Monday .. Sunday
PERIOD_START = date(2024, 1, 8)
PERIOD_END = date(2024, 1, 14)


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for integration tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def seeded_db(session_factory) -> async_sessionmaker[AsyncSession]:
    """Two employees; E001 worked Mon-Fri 08:00-17:00, E002 has no attendance."""
    async with session_factory() as session:
        directory = SqlAlchemyEmployeeDirectory(session)
        await directory.add_employee(
            "E001", "Ana", "Cruz", CompensationProfile(hourly_rate=Decimal("100")),
            position="Analyst",
            department="Finance",
            supervisor="Reyes, Ben",
            birthday=date(1990, 5, 17),
            sss_number="34-1234567-8",
            tin="123-456-789-000",
        )
        await directory.add_employee(
            "E002", "Ben", "Reyes", CompensationProfile(hourly_rate=Decimal("150")),
            status="probationary",
        )
        for offset in range(5):
            day = date.fromordinal(PERIOD_START.toordinal() + offset)
            await directory.record_login("E001", day, time(8, 0))
            await directory.record_logout("E001", day, time(17, 0))
        await session.commit()
    return session_factory


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
