"""Infrastructure Layer — database session management and observability.

Invariants:
    - Infrastructure never imports domain logic
    - Sessions roll back on any exception and re-raise it unchanged
"""
