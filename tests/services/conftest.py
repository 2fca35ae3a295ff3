"""Service test fixtures — async DB, lifecycle manager and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - SQLite enforces foreign keys (PRAGMA foreign_keys=ON), as PostgreSQL does
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness check sees the test engine
    - The manager clock is fixed (and movable) so due dates are deterministic

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and
      route tests (ON CONFLICT DO NOTHING is supported by both dialects)
    - SQLite hands datetimes back naive: tests compare through as_naive()
"""

from datetime import datetime

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import hundi.models  # noqa: F401  (registers every table on Base.metadata)
from hundi.core.domain_types import UserId
from hundi.db.base import Base
from hundi.infrastructure.database import get_db, DatabaseSessionManager
from hundi.models import Donation, Group, User
from hundi.services.donor_lifecycle import DonorLifecycleManager
import hundi.infrastructure.database as db_module
from hundi.main import app
from tests.services.donor_factories import DEFAULT_GROUPS, FIXED_NOW, FixedClock


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_user(test_db):
    """Insert the acting principal referenced as createdBy."""
    user = User(name="Collector One", email="collector@example.com")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
def actor_id(seed_user):
    """Seeded user id, read once: a rollback expires the ORM instance."""
    return UserId(seed_user.id)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def manager(test_db, clock):
    return DonorLifecycleManager(
        test_db, default_group_names=DEFAULT_GROUPS, clock=clock,
    )


@pytest.fixture
def add_group(test_db):
    """Factory: insert a group by name and commit."""
    async def _add(name: str) -> Group:
        group = Group(name=name)
        test_db.add(group)
        await test_db.commit()
        return group
    return _add


@pytest.fixture
def add_donation(test_db):
    """Factory: insert a donation for a donor and commit."""
    async def _add(donor_id, collection_date: datetime = FIXED_NOW) -> Donation:
        donation = Donation(
            donor_id=donor_id, amount=100, collection_date=collection_date,
        )
        test_db.add(donation)
        await test_db.commit()
        return donation
    return _add


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
