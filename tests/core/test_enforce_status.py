"""Status Enforcement — tests for the pure donor state machine.

Tests cover:
    - Every allowed transition in the table passes
    - Self-transitions always pass
    - collected <-> skipped is rejected with from/to carried on the error
    - plan_status_change default note, custom note and next due date
"""

from datetime import datetime, timezone
from itertools import product

import pytest

from hundi.core.domain_types import DonorStatus
from hundi.core.enforce_status import (
    ALLOWED_TRANSITIONS,
    check_transition,
    default_status_note,
    is_valid_transition,
    plan_status_change,
)
from hundi.core.errors import ErrorKind, InvalidTransitionError

PENDING = DonorStatus.PENDING
COLLECTED = DonorStatus.COLLECTED
SKIPPED = DonorStatus.SKIPPED

VALID = {
    (PENDING, COLLECTED),
    (PENDING, SKIPPED),
    (COLLECTED, PENDING),
    (SKIPPED, PENDING),
    (PENDING, PENDING),
    (COLLECTED, COLLECTED),
    (SKIPPED, SKIPPED),
}


# ─── Transition table ────────────────────────────────────────────

@pytest.mark.parametrize("current,target", sorted(VALID))
def test_allowed_transitions_pass(current, target):
    assert is_valid_transition(current, target)
    check_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [pair for pair in product(DonorStatus, repeat=2) if pair not in VALID],
)
def test_disallowed_transitions_raise(current, target):
    assert not is_valid_transition(current, target)
    with pytest.raises(InvalidTransitionError) as exc_info:
        check_transition(current, target)
    assert exc_info.value.kind == ErrorKind.INVALID_TRANSITION
    assert exc_info.value.from_status == current.value
    assert exc_info.value.to_status == target.value


def test_collected_to_skipped_message_names_both_states():
    with pytest.raises(InvalidTransitionError) as exc_info:
        check_transition(COLLECTED, SKIPPED)
    assert exc_info.value.message == (
        "Invalid status transition from collected to skipped"
    )


def test_every_state_has_a_table_entry():
    assert set(ALLOWED_TRANSITIONS) == set(DonorStatus)


# ─── plan_status_change ──────────────────────────────────────────

NOW = datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc)


def test_plan_collected_advances_due_date_one_month():
    change = plan_status_change(PENDING, COLLECTED, NOW)
    assert change.status == COLLECTED
    assert change.date == NOW
    assert change.next_collection_date == datetime(2026, 4, 15, 9, 30, tzinfo=timezone.utc)


def test_plan_skipped_advances_due_date_one_month():
    change = plan_status_change(PENDING, SKIPPED, NOW)
    assert change.next_collection_date == datetime(2026, 4, 15, 9, 30, tzinfo=timezone.utc)


def test_plan_pending_keeps_due_date():
    change = plan_status_change(COLLECTED, PENDING, NOW)
    assert change.next_collection_date is None


def test_plan_uses_default_note_when_none_given():
    change = plan_status_change(PENDING, COLLECTED, NOW)
    assert change.notes == "Status changed to collected"
    assert change.notes == default_status_note(COLLECTED)


def test_plan_uses_default_note_for_empty_string():
    change = plan_status_change(PENDING, SKIPPED, NOW, notes="")
    assert change.notes == "Status changed to skipped"


def test_plan_keeps_custom_note():
    change = plan_status_change(PENDING, SKIPPED, NOW, notes="Donor travelling")
    assert change.notes == "Donor travelling"


def test_plan_self_transition_is_recorded():
    change = plan_status_change(PENDING, PENDING, NOW)
    assert change.status == PENDING
    assert change.notes == "Status changed to pending"


def test_plan_rejects_invalid_transition():
    with pytest.raises(InvalidTransitionError):
        plan_status_change(SKIPPED, COLLECTED, NOW)
