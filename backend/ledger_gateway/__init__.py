"""Ledger Gateway Package — public HTTP gateway of an event-sourced ledger node.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
