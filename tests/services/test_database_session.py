"""Database Session Manager — rollback on exception and readiness check.

Tests cover:
    - An exception inside session() rolls back pending writes and propagates unchanged
    - A clean session leaves committed writes in place
    - health_check reports a reachable database
"""

import pytest
from sqlalchemy import func, select

from hundi.infrastructure.database import DatabaseSessionManager
from hundi.models import User


@pytest.fixture
def db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


async def _user_count(test_session_factory) -> int:
    async with test_session_factory() as session:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()


async def test_exception_rolls_back_and_propagates(db_manager, test_session_factory):
    with pytest.raises(RuntimeError, match="request aborted"):
        async with db_manager.session() as session:
            session.add(User(name="Half Written", email="half@example.com"))
            await session.flush()
            raise RuntimeError("request aborted")

    assert await _user_count(test_session_factory) == 0


async def test_committed_writes_survive(db_manager, test_session_factory):
    async with db_manager.session() as session:
        session.add(User(name="Kept", email="kept@example.com"))
        await session.commit()

    assert await _user_count(test_session_factory) == 1


async def test_health_check_reports_reachable_database(db_manager):
    assert await db_manager.health_check() is True
