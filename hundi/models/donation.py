"""Donation ORM — a collected amount linked to a donor.

Invariants:
    - donor_id FK has no cascade: a referenced donor cannot be deleted (RESTRICT)

Design Decisions:
    - Only read by the lifecycle core for referential checks; donation CRUD lives elsewhere
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Numeric, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from hundi.db.base import Base


class Donation(Base):
    """Donation event — keyed by donor and collection date."""
    __tablename__ = "donations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    donor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("donors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0"),
    )
    collection_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
