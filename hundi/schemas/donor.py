"""Donor Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - JSON field names are camelCase (hundiNo, mobileNumber, ...); snake_case also accepted
    - DonorCreate.hundi_no is required, stripped, non-empty
    - DonorUpdate has NO status fields and forbids unknown keys: status changes
      can only go through DonorStatusUpdate
    - DonorUpdate never sets a non-nullable column to null

Design Decisions:
    - alias_generator=to_camel over per-field aliases: one rule for the whole contract
    - Response models read straight from ORM rows (from_attributes)
"""

from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from hundi.core.domain_types import DonorStatus

T = TypeVar("T")

MOBILE_PATTERN = r"^\+?[0-9][0-9 \-]{5,18}[0-9]$"

_NON_NULLABLE_PATCH_FIELDS = (
    "hundi_no", "name", "mobile_number", "address", "collection_date", "group",
)


class CamelModel(BaseModel):
    """Base for every schema exchanged with clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


def _strip(v):
    return v.strip() if isinstance(v, str) else v


# --- Requests -----------------------------------------------------------------

class DonorCreate(CamelModel):
    """Donor creation — group and collectionDate are resolved by the server when omitted."""
    hundi_no: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    mobile_number: str = Field(pattern=MOBILE_PATTERN)
    address: str = Field(min_length=1, max_length=2000)
    google_map_link: str | None = Field(None, max_length=2000)
    collection_date: datetime | None = None
    group: UUID | None = None

    @field_validator(
        "hundi_no", "name", "mobile_number", "address", "google_map_link",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class DonorUpdate(CamelModel):
    """Partial update of descriptive fields. Status is not part of this shape."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )

    hundi_no: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    mobile_number: str | None = Field(None, pattern=MOBILE_PATTERN)
    address: str | None = Field(None, min_length=1, max_length=2000)
    google_map_link: str | None = Field(None, max_length=2000)
    collection_date: datetime | None = None
    group: UUID | None = None

    @field_validator(
        "hundi_no", "name", "mobile_number", "address", "google_map_link",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        nulled = [
            name for name in _NON_NULLABLE_PATCH_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"cannot be null: {', '.join(nulled)}")
        return self


class DonorStatusUpdate(CamelModel):
    """Status transition request — validated against the state machine server-side."""
    status: DonorStatus
    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes", mode="before")
    @classmethod
    def strip_notes(cls, v):
        return _strip(v) or None


# --- Responses ----------------------------------------------------------------

class UserSummary(CamelModel):
    id: UUID
    name: str
    email: str


class GroupSummary(CamelModel):
    id: UUID
    name: str
    area: str | None = None
    description: str | None = None


class StatusEntryResponse(CamelModel):
    status: DonorStatus
    date: datetime
    notes: str | None = None


class DonorResponse(CamelModel):
    """Donor joined with creator and group summaries."""
    id: UUID
    hundi_no: str
    name: str
    mobile_number: str
    address: str
    google_map_link: str | None = None
    collection_date: datetime
    status: DonorStatus
    group: GroupSummary
    created_by: UserSummary
    status_history: list[StatusEntryResponse]
    created_at: datetime
    updated_at: datetime


class DonorStatusSummaryResponse(CamelModel):
    """Status-only view of a donor plus whether this month's donation is in."""
    id: UUID
    name: str
    hundi_no: str
    status: DonorStatus
    collection_date: datetime
    group: GroupSummary
    status_history: list[StatusEntryResponse]
    donated_this_month: bool


class PaginationResponse(CamelModel):
    total: int
    page: int
    pages: int


class DonorListData(CamelModel):
    donors: list[DonorResponse]
    pagination: PaginationResponse


class DonorData(CamelModel):
    donor: DonorResponse


class DonorStatusData(CamelModel):
    donor: DonorStatusSummaryResponse


class RolloverData(CamelModel):
    checked: int
    updated: int
    failed: int


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope shared by every endpoint."""
    success: bool = True
    message: str
    data: T | None = None
