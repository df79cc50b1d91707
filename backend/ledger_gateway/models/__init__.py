"""ORM Models — SQLAlchemy declarative models for the reference node store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Subject is the aggregate root; events, signatures and pending requests
      are scoped by subject_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all()
      or Alembic autogenerate runs
    - Node values (event content, signatures, requests) stored as JSON documents
      produced by the pydantic schemas: the store never reinterprets them
"""

from ledger_gateway.models.subject import SubjectRecord  # noqa: F401
from ledger_gateway.models.event import EventRecord  # noqa: F401
from ledger_gateway.models.event_signature import EventSignatureRecord  # noqa: F401
from ledger_gateway.models.pending_request import PendingRequestRecord  # noqa: F401
