"""Hundi Donor Backend — donor lifecycle, collection groups and status rollover.

Invariants:
    - Package root only carries the version (import side-effects prohibited)
"""

__version__ = "1.0.0"
