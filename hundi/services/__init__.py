"""Services Layer — the imperative shell around the pure core.

Invariants:
    - DonorLifecycleManager owns transactions (commit/rollback) for every donor operation
    - StatusRollover only calls the manager; it never touches stores directly
"""
