"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes only normalize parameters and call NodeGateway — no business logic
    - Success bodies are the typed node values with no envelope

Design Decisions:
    - Thin routes delegate to services (ADR: functional core, imperative shell)
"""
