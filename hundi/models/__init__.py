"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Donor is the aggregate root; status history rows are owned by their donor

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from hundi.models.user import User  # noqa: F401
from hundi.models.group import Group  # noqa: F401
from hundi.models.donor import Donor  # noqa: F401
from hundi.models.donor_status_entry import DonorStatusEntry  # noqa: F401
from hundi.models.donation import Donation  # noqa: F401
