"""Donor Store — SQLAlchemy implementation of the DonorRepository protocol.

Invariants:
    - Returned donors always have group, created_by and status_history loaded
    - A unique violation on hundi_no at flush time surfaces as DuplicateKeyError
    - Never commits — the lifecycle manager owns the transaction
    - Search terms are matched literally (LIKE wildcards escaped)

Design Decisions:
    - populate_existing on reads: donors created or mutated in this session are
      reloaded with their relationships instead of served stale from the identity map
    - DonorFilters translated to SQL in one place (_apply_filters) for find and count
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hundi.core.domain_types import DonorFilters, DonorId, DonorSort
from hundi.core.enforce_status import StatusChange
from hundi.core.errors import DuplicateKeyError, HasDependentRecordsError
from hundi.models import Donor, DonorStatusEntry

logger = logging.getLogger(__name__)

_ORDERINGS = {
    DonorSort.COLLECTION_DATE_DESC: (
        Donor.collection_date.desc(), Donor.created_at.desc(),
    ),
    DonorSort.COLLECTION_DATE_ASC: (
        Donor.collection_date.asc(), Donor.created_at.asc(),
    ),
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _day_start(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _apply_filters(query: Select, filters: DonorFilters) -> Select:
    if filters.search:
        pattern = f"%{_escape_like(filters.search)}%"
        query = query.where(or_(
            Donor.name.ilike(pattern, escape="\\"),
            Donor.hundi_no.ilike(pattern, escape="\\"),
            Donor.mobile_number.ilike(pattern, escape="\\"),
        ))
    if filters.start_date:
        query = query.where(Donor.collection_date >= _day_start(filters.start_date))
    if filters.end_date:
        next_day = _day_start(filters.end_date + timedelta(days=1))
        query = query.where(Donor.collection_date < next_day)
    if filters.group_id:
        query = query.where(Donor.group_id == filters.group_id)
    if filters.statuses:
        query = query.where(Donor.status.in_([s.value for s in filters.statuses]))
    if filters.due_before:
        query = query.where(Donor.collection_date <= filters.due_before)
    return query


def _is_hundi_conflict(error: IntegrityError) -> bool:
    text = str(error.orig)
    return "uq_donors_hundi_no" in text or "donors.hundi_no" in text


class SqlDonorRepository:
    """Donor persistence backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_hundi_no(self, hundi_no: str) -> Donor | None:
        result = await self.db.execute(
            select(Donor).where(Donor.hundi_no == hundi_no),
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, donor_id: DonorId) -> Donor | None:
        result = await self.db.execute(
            select(Donor)
            .where(Donor.id == donor_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def find(
        self, filters: DonorFilters, sort: DonorSort, skip: int, limit: int,
    ) -> list[Donor]:
        query = _apply_filters(select(Donor), filters)
        query = query.order_by(*_ORDERINGS[sort]).offset(skip).limit(limit)
        result = await self.db.execute(
            query.execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def count_documents(self, filters: DonorFilters) -> int:
        query = _apply_filters(select(func.count()).select_from(Donor), filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def create(self, fields: dict[str, Any]) -> Donor:
        """Insert a donor; `status_history` is a list of {status, date, notes} dicts."""
        fields = dict(fields)
        history = fields.pop("status_history", [])
        donor = Donor(**fields)
        donor.status_history = [
            DonorStatusEntry(position=i, **entry) for i, entry in enumerate(history)
        ]
        self.db.add(donor)
        await self._flush(donor.hundi_no)
        return await self.find_by_id(donor.id)

    async def update_by_id(
        self, donor_id: DonorId, fields: dict[str, Any],
    ) -> Donor | None:
        donor = await self.find_by_id(donor_id)
        if donor is None:
            return None
        for key, value in fields.items():
            setattr(donor, key, value)
        await self._flush(fields.get("hundi_no", donor.hundi_no))
        return await self.find_by_id(donor_id)

    async def delete_by_id(self, donor_id: DonorId) -> bool:
        donor = await self.find_by_id(donor_id)
        if donor is None:
            return False
        await self.db.delete(donor)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # donations.donor_id is RESTRICT: a donation inserted since the count check
            logger.warning(
                f"Donor delete blocked by dependent rows: {e.orig}",
                extra={"donor_id": donor_id},
            )
            raise HasDependentRecordsError() from e
        return True

    async def apply_status_change(
        self, donor: Donor, change: StatusChange,
    ) -> Donor:
        """Append one history entry and move status/collection date accordingly."""
        donor.status_history.append(DonorStatusEntry(
            position=len(donor.status_history),
            status=change.status.value,
            date=change.date,
            notes=change.notes,
        ))
        donor.status = change.status.value
        if change.next_collection_date is not None:
            donor.collection_date = change.next_collection_date
        await self.db.flush()
        return await self.find_by_id(donor.id)

    async def _flush(self, hundi_no: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            if _is_hundi_conflict(e):
                raise DuplicateKeyError(hundi_no) from e
            raise
