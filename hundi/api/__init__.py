"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, message, data} envelope or an error envelope

Design Decisions:
    - Thin routes delegate to DonorLifecycleManager
"""
