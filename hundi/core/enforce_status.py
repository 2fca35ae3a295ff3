"""Donor Status Enforcement — the collection state machine as pure functions.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - ALLOWED_TRANSITIONS is the single source of truth for legal moves
    - Self-transitions (same -> same) are always legal and still recorded in history
    - A collected/skipped outcome always pushes the next due date one month past `now`

Design Decisions:
    - Raises InvalidTransitionError instead of returning an error dict: the manager
      propagates it unchanged to the operation boundary
    - plan_status_change returns a StatusChange value; the shell applies it to the ORM row
"""

from dataclasses import dataclass
from datetime import datetime

from hundi.core.collection_calendar import add_one_month
from hundi.core.domain_types import DonorStatus
from hundi.core.errors import InvalidTransitionError


ALLOWED_TRANSITIONS: dict[DonorStatus, frozenset[DonorStatus]] = {
    DonorStatus.PENDING: frozenset({DonorStatus.COLLECTED, DonorStatus.SKIPPED}),
    DonorStatus.COLLECTED: frozenset({DonorStatus.PENDING}),
    DonorStatus.SKIPPED: frozenset({DonorStatus.PENDING}),
}

# Outcomes that close the current collection cycle and schedule the next one.
CYCLE_CLOSING_STATUSES: frozenset[DonorStatus] = frozenset(
    {DonorStatus.COLLECTED, DonorStatus.SKIPPED},
)


@dataclass(frozen=True)
class StatusChange:
    """Everything the shell needs to persist one validated transition."""
    status: DonorStatus
    date: datetime
    notes: str
    next_collection_date: datetime | None


def is_valid_transition(current: DonorStatus, target: DonorStatus) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def check_transition(current: DonorStatus, target: DonorStatus) -> None:
    """Raise InvalidTransitionError when current -> target is not in the table."""
    if not is_valid_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def default_status_note(target: DonorStatus) -> str:
    return f"Status changed to {target.value}"


def plan_status_change(
    current: DonorStatus,
    target: DonorStatus,
    now: datetime,
    notes: str | None = None,
) -> StatusChange:
    """Validate a transition and compute the history entry and next due date."""
    check_transition(current, target)
    next_date = add_one_month(now) if target in CYCLE_CLOSING_STATUSES else None
    return StatusChange(
        status=target,
        date=now,
        notes=notes or default_status_note(target),
        next_collection_date=next_date,
    )
