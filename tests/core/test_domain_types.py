"""Domain Types — verifies rich type definitions and enum values.

Tests cover:
    - NewType wrappers exist and are callable
    - DonorStatus has exactly the three collection states and serializes to string
    - DonorFilters defaults to "no constraint" on every field
"""

from uuid import uuid4

from hundi.core.domain_types import (
    DEFAULT_GROUP_NAME,
    DonorFilters, DonorId, DonorSort, DonorStatus, GroupId, UserId,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert DonorId(uid) == uid
    assert GroupId(uid) == uid
    assert UserId(uid) == uid


def test_donor_status_has_three_states():
    assert {s.value for s in DonorStatus} == {"pending", "collected", "skipped"}


def test_donor_status_is_str():
    assert DonorStatus.PENDING == "pending"
    assert DonorStatus("skipped") is DonorStatus.SKIPPED


def test_default_sort_is_collection_date_descending():
    assert DonorSort.COLLECTION_DATE_DESC.value == "-collection_date"


def test_default_group_name():
    assert DEFAULT_GROUP_NAME == "Group A"


def test_filters_default_to_unconstrained():
    filters = DonorFilters()
    assert filters.search is None
    assert filters.start_date is None
    assert filters.end_date is None
    assert filters.group_id is None
    assert filters.statuses is None
    assert filters.due_before is None


def test_sort_options_are_collection_date_only():
    assert {s.value for s in DonorSort} == {"-collection_date", "collection_date"}
