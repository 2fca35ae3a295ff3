"""Store Implementations — SQLAlchemy-backed repositories for the core protocols.

Invariants:
    - Each repository wraps one AsyncSession and never commits
    - Return types satisfy the structural protocols in core/repository_protocols.py
"""

from hundi.repositories.donor_repository import SqlDonorRepository  # noqa: F401
from hundi.repositories.group_repository import SqlGroupRepository  # noqa: F401
from hundi.repositories.donation_repository import SqlDonationRepository  # noqa: F401
