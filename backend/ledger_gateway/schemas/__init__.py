"""Pydantic Schemas — wire and value types exchanged with callers and the node.

Invariants:
    - Schemas validate at system boundary (caller input, node results)
    - Domain enums from core/ used for tagged fields

Design Decisions:
    - Separate from ORM models: schemas are API contracts, models are the
      reference node's persistence (ADR: DDD boundary)
"""
