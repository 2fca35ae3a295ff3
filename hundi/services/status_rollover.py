"""Status Rollover — returns due collected/skipped donors to pending.

Invariants:
    - Uses DonorLifecycleManager.update_donor_status for every donor (same contract
      as a manual status change, same history entry semantics)
    - One donor failing never aborts the batch; failures are counted and logged
    - Scheduling (interval, cron) is the caller's concern
"""

import logging
from dataclasses import dataclass, asdict

from hundi.core.domain_types import ROLLOVER_NOTE, DonorStatus
from hundi.core.errors import HundiError
from hundi.services.donor_lifecycle import DonorLifecycleManager

logger = logging.getLogger(__name__)


@dataclass
class RolloverResult:
    checked: int = 0
    updated: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class StatusRollover:
    """Batch caller of the status-transition operation."""

    def __init__(self, manager: DonorLifecycleManager, batch_size: int = 500):
        self.manager = manager
        self.batch_size = batch_size

    async def run(self) -> RolloverResult:
        result = RolloverResult()
        due_ids = await self.manager.find_due_for_rollover(self.batch_size)
        result.checked = len(due_ids)

        for donor_id in due_ids:
            try:
                await self.manager.update_donor_status(
                    donor_id, DonorStatus.PENDING, ROLLOVER_NOTE,
                )
                result.updated += 1
            except HundiError as e:
                result.failed += 1
                logger.warning(
                    f"Rollover skipped donor: {e.message}",
                    extra={"donor_id": donor_id, "error_code": e.code},
                )

        logger.info("Status rollover completed", extra=result.to_dict())
        return result
