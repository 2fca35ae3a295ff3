"""Initial schema — users, groups, donors, donor_status_history, donations.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "groups",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("area", sa.String(200), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_groups_name"),
    )

    op.create_table(
        "donors",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("hundi_no", sa.String(50), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("mobile_number", sa.String(20), nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("google_map_link", sa.Text, nullable=True),
        sa.Column("collection_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("group_id", UUID(as_uuid=True), sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("created_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("hundi_no", name="uq_donors_hundi_no"),
        sa.CheckConstraint(
            "status IN ('pending', 'collected', 'skipped')", name="ck_donors_status",
        ),
    )
    op.create_index("ix_donors_collection_date", "donors", ["collection_date"])
    op.create_index("ix_donors_group_id", "donors", ["group_id"])

    op.create_table(
        "donor_status_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "donor_id", UUID(as_uuid=True),
            sa.ForeignKey("donors.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.UniqueConstraint("donor_id", "position", name="uq_donor_status_position"),
    )
    op.create_index(
        "ix_donor_status_history_donor_id", "donor_status_history", ["donor_id"],
    )

    op.create_table(
        "donations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "donor_id", UUID(as_uuid=True),
            sa.ForeignKey("donors.id", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("collection_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_donations_donor_id", "donations", ["donor_id"])
    op.create_index("ix_donations_collection_date", "donations", ["collection_date"])


def downgrade() -> None:
    op.drop_table("donations")
    op.drop_table("donor_status_history")
    op.drop_table("donors")
    op.drop_table("groups")
    op.drop_table("users")
