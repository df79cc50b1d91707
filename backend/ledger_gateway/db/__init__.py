"""Database Infrastructure — SQLAlchemy Base for the reference node store.

Invariants:
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite by default: the reference node is a single-process development
      node; any async SQLAlchemy URL works
"""
