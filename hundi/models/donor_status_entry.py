"""DonorStatusEntry ORM — one row of a donor's append-only status history.

Invariants:
    - Always belongs to a Donor (donor_id FK, cascades on delete)
    - (donor_id, position) is unique; position starts at 0 with the creation entry
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from hundi.db.base import Base


class DonorStatusEntry(Base):
    """Status history entry — {status, date, notes}."""
    __tablename__ = "donor_status_history"
    __table_args__ = (
        UniqueConstraint("donor_id", "position", name="uq_donor_status_position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    donor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("donors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    donor: Mapped["Donor"] = relationship(
        "Donor", back_populates="status_history",
    )
