"""Core Layer — pure domain logic: state machine, calendar, pagination, errors, protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, repositories/ or db/
    - All functions are pure and deterministic (the clock is always passed in)

Design Decisions:
    - Functional core separated from imperative shell
"""
