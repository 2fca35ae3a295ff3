"""Boundary Protocols — contracts between the lifecycle core and the stores.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by hundi.repositories via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the pure state machine never awaits
    - Stores flush but never commit — the caller owns the transaction
"""

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from hundi.core.domain_types import (
    DonorFilters, DonorId, DonorSort, GroupId, UserId,
)
from hundi.core.enforce_status import StatusChange


class GroupLike(Protocol):
    """Structural contract for Group rows handed back by the Group Store."""
    id: UUID
    name: str
    area: str | None
    description: str | None


class DonorLike(Protocol):
    """Structural contract for Donor rows handed back by the Donor Store."""
    id: UUID
    hundi_no: str
    name: str
    status: str
    collection_date: datetime
    group_id: UUID
    status_history: list


class GroupRepository(Protocol):
    """Contract for group persistence — implemented by shell."""
    async def count_all(self) -> int: ...
    async def find_by_name(self, name: str) -> GroupLike | None: ...
    async def find_by_id(self, group_id: GroupId) -> GroupLike | None: ...
    async def bootstrap_defaults(
        self, owner_id: UserId, names: list[str],
    ) -> list[GroupLike]: ...


class DonationRepository(Protocol):
    """Contract for donation lookups — implemented by shell."""
    async def count_for_donor_in_range(
        self, donor_id: DonorId, start: datetime, end: datetime,
    ) -> int: ...
    async def count_for_donor(self, donor_id: DonorId) -> int: ...


class DonorRepository(Protocol):
    """Contract for donor persistence — implemented by shell."""
    async def find_by_hundi_no(self, hundi_no: str) -> DonorLike | None: ...
    async def find_by_id(self, donor_id: DonorId) -> DonorLike | None: ...
    async def find(
        self, filters: DonorFilters, sort: DonorSort, skip: int, limit: int,
    ) -> list[DonorLike]: ...
    async def count_documents(self, filters: DonorFilters) -> int: ...
    async def create(self, fields: dict[str, Any]) -> DonorLike: ...
    async def update_by_id(
        self, donor_id: DonorId, fields: dict[str, Any],
    ) -> DonorLike | None: ...
    async def delete_by_id(self, donor_id: DonorId) -> bool: ...
    async def apply_status_change(
        self, donor: DonorLike, change: StatusChange,
    ) -> DonorLike: ...
