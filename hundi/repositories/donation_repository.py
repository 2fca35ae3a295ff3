"""Donation Store — read-only count queries used for referential checks."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hundi.core.domain_types import DonorId
from hundi.models import Donation


class SqlDonationRepository:
    """Donation lookups backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_for_donor_in_range(
        self, donor_id: DonorId, start: datetime, end: datetime,
    ) -> int:
        """Count donations with start <= collection_date < end."""
        result = await self.db.execute(
            select(func.count())
            .select_from(Donation)
            .where(Donation.donor_id == donor_id)
            .where(Donation.collection_date >= start)
            .where(Donation.collection_date < end)
        )
        return result.scalar_one()

    async def count_for_donor(self, donor_id: DonorId) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Donation)
            .where(Donation.donor_id == donor_id)
        )
        return result.scalar_one()
