"""Group ORM — named collection groups that donors are assigned to.

Invariants:
    - name is unique (uq_groups_name) — backstop for concurrent default bootstrap
    - created_by_id is nullable: groups may predate any user

Design Decisions:
    - Unique constraint named explicitly so migrations and ON CONFLICT target agree
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from hundi.db.base import Base


class Group(Base):
    """Collection group — e.g. "Group A" covering one area."""
    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("name", name="uq_groups_name"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    donors: Mapped[list["Donor"]] = relationship(
        "Donor", back_populates="group",
    )
