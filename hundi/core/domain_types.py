"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - DonorId, GroupId, UserId wrap UUIDs — never use bare UUID in domain logic
    - All valid donor states encoded as DonorStatus — no raw string matching
    - DEFAULT_GROUP_NAME is the single source of truth for the fallback group

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

DonorId = NewType("DonorId", UUID)
GroupId = NewType("GroupId", UUID)
UserId = NewType("UserId", UUID)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_GROUP_NAME = "Group A"
CREATION_NOTE = "Donor created"
ROLLOVER_NOTE = "Collection due"


# ─── Enums ───────────────────────────────────────────────────────

class DonorStatus(str, Enum):
    """Donor collection states — maps to DB `status` column."""
    PENDING = "pending"
    COLLECTED = "collected"
    SKIPPED = "skipped"


class DonorSort(str, Enum):
    """Allowed listing orders. Leading '-' means descending."""
    COLLECTION_DATE_DESC = "-collection_date"
    COLLECTION_DATE_ASC = "collection_date"


# ─── Query Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class DonorFilters:
    """Listing filters. Every field is optional; None means no constraint."""
    search: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    group_id: GroupId | None = None
    statuses: tuple[DonorStatus, ...] | None = None
    due_before: datetime | None = None
