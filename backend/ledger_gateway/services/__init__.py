"""Services Layer — node dispatch and single-item narrowing.

Invariants:
    - One node call per capability, always through NodeGateway._invoke

Design Decisions:
    - Gateway depends on the NodeAPI Protocol only (ADR: dependency arrows point inward)
"""
