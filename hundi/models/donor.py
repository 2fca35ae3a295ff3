"""Donor ORM — persists a hundi holder and their collection cycle.

Invariants:
    - hundi_no is globally unique (uq_donors_hundi_no) — race backstop for duplicate checks
    - group_id and created_by_id are non-nullable after creation
    - status is one of DonorStatus values; only the lifecycle manager writes it
    - status_history is append-only, ordered by position, never empty

Design Decisions:
    - status_history as a child table rather than a JSON column: append is an INSERT,
      ordering is explicit, no read-modify-write of a whole array
    - group, created_by and status_history load with selectin: every response joins them
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint, String, Text, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from hundi.core.domain_types import DonorStatus
from hundi.db.base import Base


class Donor(Base):
    """Donor entity — one hundi box and its collection schedule."""
    __tablename__ = "donors"
    __table_args__ = (
        UniqueConstraint("hundi_no", name="uq_donors_hundi_no"),
        CheckConstraint(
            "status IN ('pending', 'collected', 'skipped')",
            name="ck_donors_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    hundi_no: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    mobile_number: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    google_map_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    collection_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DonorStatus.PENDING.value,
    )
    group_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id"), nullable=False, index=True,
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    group: Mapped["Group"] = relationship(
        "Group", back_populates="donors", lazy="selectin",
    )
    created_by: Mapped["User"] = relationship("User", lazy="selectin")
    status_history: Mapped[list["DonorStatusEntry"]] = relationship(
        "DonorStatusEntry", back_populates="donor",
        order_by="DonorStatusEntry.position",
        cascade="all, delete-orphan", lazy="selectin",
    )
