"""Route Dependencies — acting principal and lifecycle manager wiring.

Invariants:
    - The acting principal comes from the X-User-Id header (authentication is upstream)
    - One DonorLifecycleManager per request, bound to the request's AsyncSession
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from hundi.config import Settings, get_settings
from hundi.core.domain_types import UserId
from hundi.core.errors import FieldError, InvalidIdFormatError, ValidationFailedError
from hundi.infrastructure.database import get_db
from hundi.services.donor_lifecycle import DonorLifecycleManager
from hundi.services.status_rollover import StatusRollover


async def get_actor_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UserId:
    """Resolve the acting principal forwarded by the auth layer."""
    if not x_user_id:
        raise ValidationFailedError(
            [FieldError("X-User-Id", "header is required")],
        )
    try:
        return UserId(UUID(x_user_id))
    except ValueError:
        raise InvalidIdFormatError("User", x_user_id)


async def get_lifecycle_manager(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DonorLifecycleManager:
    return DonorLifecycleManager(
        db, default_group_names=settings.default_group_names,
    )


async def get_status_rollover(
    manager: DonorLifecycleManager = Depends(get_lifecycle_manager),
    settings: Settings = Depends(get_settings),
) -> StatusRollover:
    return StatusRollover(manager, batch_size=settings.rollover_batch_size)
