"""Donor Lifecycle Manager — creation, listing, updates, status transitions and deletion.

Invariants:
    - Every operation runs inside _boundary(): HundiError propagates unchanged, anything
      else is logged and wrapped in UnexpectedError; both roll the session back
    - create_donor is one transaction: duplicate check, default-group bootstrap, group
      resolution and insert commit together or not at all
    - Status only changes through update_donor_status (DonorUpdate has no status fields)
    - Every status change appends exactly one history entry
    - A donor referenced by any donation is never deleted

Design Decisions:
    - Stores injected as protocol implementations; defaults are the SQL repositories
      bound to the same AsyncSession so they share one transaction
    - Clock injected (defaults to UTC now): due-date arithmetic is testable
    - Manual and scheduled status changes share update_donor_status — no separate path
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hundi.core.collection_calendar import add_one_month, month_bounds
from hundi.core.domain_types import (
    CREATION_NOTE, DEFAULT_GROUP_NAME,
    DonorFilters, DonorId, DonorSort, DonorStatus, GroupId, UserId,
)
from hundi.core.enforce_status import CYCLE_CLOSING_STATUSES, plan_status_change
from hundi.core.errors import (
    DependencyInitFailedError, DuplicateKeyError, FieldError, HasDependentRecordsError,
    HundiError, InvalidIdFormatError, MissingDefaultGroupError, ResourceNotFoundError,
    UnexpectedError, ValidationFailedError,
)
from hundi.core.pagination import (
    MAX_PAGE_LIMIT, PageInfo, build_page_info, page_offset,
)
from hundi.core.repository_protocols import (
    DonationRepository, DonorLike, DonorRepository, GroupRepository,
)
from hundi.repositories import (
    SqlDonationRepository, SqlDonorRepository, SqlGroupRepository,
)
from hundi.schemas.donor import DonorCreate, DonorUpdate

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DonorPage:
    donors: list[DonorLike]
    pagination: PageInfo


@dataclass
class DonorStatusSummary:
    donor: DonorLike
    donated_this_month: bool


def parse_id(raw_id: str | UUID, resource_type: str = "Donor") -> UUID:
    """Parse a path/body identifier, raising InvalidIdFormatError on garbage."""
    if isinstance(raw_id, UUID):
        return raw_id
    try:
        return UUID(str(raw_id))
    except ValueError:
        raise InvalidIdFormatError(resource_type, str(raw_id))


class DonorLifecycleManager:
    """Orchestrates the donor, group and donation stores for every donor operation."""

    def __init__(
        self,
        db: AsyncSession,
        donors: DonorRepository | None = None,
        groups: GroupRepository | None = None,
        donations: DonationRepository | None = None,
        default_group_names: list[str] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.donors = donors or SqlDonorRepository(db)
        self.groups = groups or SqlGroupRepository(db)
        self.donations = donations or SqlDonationRepository(db)
        self.default_group_names = default_group_names or [DEFAULT_GROUP_NAME]
        self.clock = clock

    # ─── Operations ──────────────────────────────────────────────

    async def create_donor(self, data: DonorCreate, actor_id: UserId) -> DonorLike:
        """Create a donor, bootstrapping default groups on an empty system."""
        async with self._boundary("create_donor", commit=True):
            if await self.donors.find_by_hundi_no(data.hundi_no):
                raise DuplicateKeyError(data.hundi_no)

            group_id = await self._resolve_group(data.group, actor_id)
            now = self.clock()
            donor = await self.donors.create({
                "hundi_no": data.hundi_no,
                "name": data.name,
                "mobile_number": data.mobile_number,
                "address": data.address,
                "google_map_link": data.google_map_link,
                "collection_date": data.collection_date or add_one_month(now),
                "group_id": group_id,
                "created_by_id": actor_id,
                "status": DonorStatus.PENDING.value,
                "status_history": [{
                    "status": DonorStatus.PENDING.value,
                    "date": now,
                    "notes": CREATION_NOTE,
                }],
            })
            logger.info(
                f"Donor created: hundi {donor.hundi_no}",
                extra={"donor_id": donor.id, "operation": "create_donor"},
            )
            return donor

    async def list_donors(
        self,
        page: int = 1,
        limit: int = 10,
        filters: DonorFilters | None = None,
        sort: DonorSort = DonorSort.COLLECTION_DATE_DESC,
    ) -> DonorPage:
        _check_page_window(page, limit)
        filters = filters or DonorFilters()
        async with self._boundary("list_donors"):
            total = await self.donors.count_documents(filters)
            donors = await self.donors.find(
                filters, sort, page_offset(page, limit), limit,
            )
            return DonorPage(
                donors=donors, pagination=build_page_info(total, page, limit),
            )

    async def get_donor_by_id(self, raw_id: str | UUID) -> DonorLike:
        donor_id = DonorId(parse_id(raw_id))
        async with self._boundary("get_donor_by_id"):
            return await self._get_or_404(donor_id)

    async def get_donor_status_summary(self, raw_id: str | UUID) -> DonorStatusSummary:
        """Donor status view plus whether a donation exists for the current month."""
        donor_id = DonorId(parse_id(raw_id))
        async with self._boundary("get_donor_status_summary"):
            donor = await self._get_or_404(donor_id)
            start, end = month_bounds(self.clock())
            count = await self.donations.count_for_donor_in_range(donor_id, start, end)
            return DonorStatusSummary(donor=donor, donated_this_month=count > 0)

    async def update_donor(self, raw_id: str | UUID, patch: DonorUpdate) -> DonorLike:
        """Apply a partial update of descriptive fields."""
        donor_id = DonorId(parse_id(raw_id))
        fields = patch.model_dump(exclude_unset=True)
        async with self._boundary("update_donor", commit=True):
            donor = await self._get_or_404(donor_id)

            new_hundi_no = fields.get("hundi_no")
            if new_hundi_no and new_hundi_no != donor.hundi_no:
                if await self.donors.find_by_hundi_no(new_hundi_no):
                    raise DuplicateKeyError(new_hundi_no)

            if "group" in fields:
                group_id = GroupId(fields.pop("group"))
                if await self.groups.find_by_id(group_id) is None:
                    raise ResourceNotFoundError("Group", str(group_id))
                fields["group_id"] = group_id

            if not fields:
                return donor
            updated = await self.donors.update_by_id(donor_id, fields)
            logger.info(
                f"Donor updated: {', '.join(sorted(fields))}",
                extra={"donor_id": donor_id, "operation": "update_donor"},
            )
            return updated

    async def update_donor_status(
        self,
        raw_id: str | UUID,
        status: DonorStatus | str,
        notes: str | None = None,
    ) -> DonorLike:
        """Move a donor through the state machine and record the change."""
        donor_id = DonorId(parse_id(raw_id))
        target = _parse_status(status)
        async with self._boundary("update_donor_status", commit=True):
            donor = await self._get_or_404(donor_id)
            change = plan_status_change(
                DonorStatus(donor.status), target, self.clock(), notes,
            )
            updated = await self.donors.apply_status_change(donor, change)
            logger.info(
                f"Donor status changed to {target.value}",
                extra={"donor_id": donor_id, "operation": "update_donor_status"},
            )
            return updated

    async def delete_donor(self, raw_id: str | UUID) -> None:
        """Delete a donor that no donation references."""
        donor_id = DonorId(parse_id(raw_id))
        async with self._boundary("delete_donor", commit=True):
            await self._get_or_404(donor_id)
            donation_count = await self.donations.count_for_donor(donor_id)
            if donation_count > 0:
                raise HasDependentRecordsError(donation_count)
            await self.donors.delete_by_id(donor_id)
            logger.info(
                "Donor deleted",
                extra={"donor_id": donor_id, "operation": "delete_donor"},
            )

    async def find_due_for_rollover(self, limit: int) -> list[DonorId]:
        """Ids of collected/skipped donors whose next collection date has arrived."""
        filters = DonorFilters(
            statuses=tuple(CYCLE_CLOSING_STATUSES), due_before=self.clock(),
        )
        async with self._boundary("find_due_for_rollover"):
            donors = await self.donors.find(
                filters, DonorSort.COLLECTION_DATE_ASC, 0, limit,
            )
            return [DonorId(d.id) for d in donors]

    # ─── Helpers ─────────────────────────────────────────────────

    async def _get_or_404(self, donor_id: DonorId) -> DonorLike:
        donor = await self.donors.find_by_id(donor_id)
        if donor is None:
            raise ResourceNotFoundError("Donor", str(donor_id))
        return donor

    async def _resolve_group(
        self, explicit_group: UUID | None, actor_id: UserId,
    ) -> GroupId:
        """Bootstrap defaults on an empty system, then pick explicit or "Group A"."""
        bootstrapped = []
        if await self.groups.count_all() == 0:
            try:
                bootstrapped = await self.groups.bootstrap_defaults(
                    actor_id, self.default_group_names,
                )
            except Exception as e:
                logger.error(
                    f"Error initializing default groups: {e}",
                    exc_info=True, extra={"operation": "create_donor"},
                )
                raise DependencyInitFailedError(str(e)) from e

        if explicit_group is not None:
            group = await self.groups.find_by_id(GroupId(explicit_group))
            if group is None:
                raise ResourceNotFoundError("Group", str(explicit_group))
            return GroupId(group.id)

        for group in bootstrapped:
            if group.name == DEFAULT_GROUP_NAME:
                return GroupId(group.id)

        default_group = await self.groups.find_by_name(DEFAULT_GROUP_NAME)
        if default_group is None:
            raise MissingDefaultGroupError(DEFAULT_GROUP_NAME)
        return GroupId(default_group.id)

    @asynccontextmanager
    async def _boundary(
        self, operation: str, commit: bool = False,
    ) -> AsyncGenerator[None, None]:
        """Translate failures to the error taxonomy and own commit/rollback."""
        try:
            yield
            if commit:
                await self.db.commit()
        except HundiError as e:
            await self.db.rollback()
            e.context.operation = e.context.operation or operation
            logger.warning(
                f"{operation} failed: {e.message}",
                extra={
                    "operation": operation,
                    "error_code": e.code,
                    "error_kind": e.kind.value,
                },
            )
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(
                f"{operation} failed unexpectedly: {e}",
                exc_info=True, extra={"operation": operation},
            )
            raise UnexpectedError(operation, str(e)) from e


def _check_page_window(page: int, limit: int) -> None:
    errors = []
    if page < 1:
        errors.append(FieldError("page", "must be at least 1"))
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        errors.append(FieldError("limit", f"must be between 1 and {MAX_PAGE_LIMIT}"))
    if errors:
        raise ValidationFailedError(errors)


def _parse_status(status: DonorStatus | str) -> DonorStatus:
    try:
        return DonorStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in DonorStatus)
        raise ValidationFailedError(
            [FieldError("status", f"must be one of: {allowed}")],
        )
