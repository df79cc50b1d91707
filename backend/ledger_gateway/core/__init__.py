"""Core Layer — pure gateway logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Parameter normalization, origin classification and error mapping are
      pure functions

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
