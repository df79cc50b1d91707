"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Every router except health requires the X-API-KEY header
    - Path and query values are taken as raw strings and parsed by
      core/normalize_params.py, so malformed values surface as REQUEST_ERROR

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
