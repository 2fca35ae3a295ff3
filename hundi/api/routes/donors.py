"""Donor Routes — one endpoint per lifecycle operation.

Invariants:
    - Routes never contain business logic: parse, delegate to DonorLifecycleManager, shape
    - Every success response is the ApiResponse envelope {success, message, data}
    - Donor ids arrive as raw strings; the manager maps malformed ids to InvalidIdFormat
    - PUT /{id} cannot touch status; PATCH /{id}/status is the only status path
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hundi.api.dependencies import (
    get_actor_id, get_lifecycle_manager, get_status_rollover,
)
from hundi.core.domain_types import DonorFilters, GroupId, UserId
from hundi.core.errors import FieldError, ValidationFailedError
from hundi.core.pagination import MAX_PAGE_LIMIT
from hundi.schemas.donor import (
    ApiResponse, DonorCreate, DonorData, DonorListData, DonorResponse,
    DonorStatusData, DonorStatusSummaryResponse, DonorStatusUpdate, DonorUpdate,
    GroupSummary, PaginationResponse, RolloverData, StatusEntryResponse,
)
from hundi.services.donor_lifecycle import DonorLifecycleManager, DonorStatusSummary
from hundi.services.status_rollover import StatusRollover

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/donors", tags=["donors"])


def _donor_data(donor) -> DonorData:
    return DonorData(donor=DonorResponse.model_validate(donor))


def _status_data(summary: DonorStatusSummary) -> DonorStatusData:
    donor = summary.donor
    return DonorStatusData(donor=DonorStatusSummaryResponse(
        id=donor.id,
        name=donor.name,
        hundi_no=donor.hundi_no,
        status=donor.status,
        collection_date=donor.collection_date,
        group=GroupSummary.model_validate(donor.group),
        status_history=[
            StatusEntryResponse.model_validate(e) for e in donor.status_history
        ],
        donated_this_month=summary.donated_this_month,
    ))


@router.post(
    "", response_model=ApiResponse[DonorData],
    status_code=status.HTTP_201_CREATED,
)
async def create_donor(
    body: DonorCreate,
    actor_id: UserId = Depends(get_actor_id),
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    """Create a donor; default groups are bootstrapped on an empty system."""
    donor = await manager.create_donor(body, actor_id)
    return ApiResponse[DonorData](
        message="Donor created successfully", data=_donor_data(donor),
    )


@router.get("", response_model=ApiResponse[DonorListData])
async def list_donors(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    search: str | None = Query(None, max_length=200),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    group: UUID | None = Query(None),
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    """List donors newest collection date first, with search and date/group filters."""
    if start_date and end_date and start_date > end_date:
        raise ValidationFailedError(
            [FieldError("startDate", "must be on or before endDate")],
        )
    filters = DonorFilters(
        search=search.strip() if search and search.strip() else None,
        start_date=start_date,
        end_date=end_date,
        group_id=GroupId(group) if group else None,
    )
    result = await manager.list_donors(page=page, limit=limit, filters=filters)
    return ApiResponse[DonorListData](
        message="Donors retrieved successfully",
        data=DonorListData(
            donors=[DonorResponse.model_validate(d) for d in result.donors],
            pagination=PaginationResponse(
                total=result.pagination.total,
                page=result.pagination.page,
                pages=result.pagination.pages,
            ),
        ),
    )


@router.post("/status-rollover", response_model=ApiResponse[RolloverData])
async def trigger_status_rollover(
    rollover: StatusRollover = Depends(get_status_rollover),
):
    """Return due collected/skipped donors to pending (manual trigger of the scheduled job)."""
    result = await rollover.run()
    return ApiResponse[RolloverData](
        message="Donor status update completed successfully",
        data=RolloverData(**result.to_dict()),
    )


@router.get("/{donor_id}", response_model=ApiResponse[DonorData])
async def get_donor(
    donor_id: str,
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    donor = await manager.get_donor_by_id(donor_id)
    return ApiResponse[DonorData](
        message="Donor retrieved successfully", data=_donor_data(donor),
    )


@router.get("/{donor_id}/status", response_model=ApiResponse[DonorStatusData])
async def get_donor_status(
    donor_id: str,
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    summary = await manager.get_donor_status_summary(donor_id)
    return ApiResponse[DonorStatusData](
        message="Donor status retrieved successfully", data=_status_data(summary),
    )


@router.put("/{donor_id}", response_model=ApiResponse[DonorData])
async def update_donor(
    donor_id: str,
    body: DonorUpdate,
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    """Update descriptive fields. Status changes are rejected by the request shape."""
    donor = await manager.update_donor(donor_id, body)
    return ApiResponse[DonorData](
        message="Donor updated successfully", data=_donor_data(donor),
    )


@router.patch("/{donor_id}/status", response_model=ApiResponse[DonorData])
async def update_donor_status(
    donor_id: str,
    body: DonorStatusUpdate,
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    donor = await manager.update_donor_status(donor_id, body.status, body.notes)
    return ApiResponse[DonorData](
        message="Donor status updated successfully", data=_donor_data(donor),
    )


@router.delete("/{donor_id}")
async def delete_donor(
    donor_id: str,
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
):
    await manager.delete_donor(donor_id)
    return {"success": True, "message": "Donor deleted successfully"}
