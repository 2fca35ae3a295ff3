"""Group Store — SQLAlchemy implementation of the GroupRepository protocol.

Invariants:
    - bootstrap_defaults is idempotent: INSERT ... ON CONFLICT (name) DO NOTHING
    - Concurrent bootstraps never duplicate a group (uq_groups_name is the backstop)
    - Never commits — the lifecycle manager owns the transaction

Design Decisions:
    - Dialect-specific insert (postgresql / sqlite) for ON CONFLICT support; other
      dialects fall back to per-name existence checks
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from hundi.core.domain_types import GroupId, UserId
from hundi.models import Group

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SqlGroupRepository:
    """Group persistence backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Group))
        return result.scalar_one()

    async def find_by_name(self, name: str) -> Group | None:
        result = await self.db.execute(select(Group).where(Group.name == name))
        return result.scalar_one_or_none()

    async def find_by_id(self, group_id: GroupId) -> Group | None:
        return await self.db.get(Group, group_id)

    async def bootstrap_defaults(
        self, owner_id: UserId, names: list[str],
    ) -> list[Group]:
        """Ensure every default group exists; return them in `names` order."""
        now = datetime.now(timezone.utc)
        rows = [
            {
                "id": uuid.uuid4(),
                "name": name,
                "description": f"Default collection group {name}",
                "created_by_id": owner_id,
                "created_at": now,
            }
            for name in names
        ]
        insert_fn = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert_fn is not None:
            stmt = insert_fn(Group).values(rows).on_conflict_do_nothing(
                index_elements=[Group.name],
            )
            await self.db.execute(stmt)
        else:
            for row in rows:
                if await self.find_by_name(row["name"]) is None:
                    self.db.add(Group(**row))
            await self.db.flush()

        result = await self.db.execute(select(Group).where(Group.name.in_(names)))
        by_name = {group.name: group for group in result.scalars()}
        logger.info(f"Default groups ensured: {', '.join(by_name)}")
        return [by_name[name] for name in names if name in by_name]
