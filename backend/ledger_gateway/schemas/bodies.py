"""Request Bodies — inbound JSON bodies validated at the API boundary.

Invariants:
    - PostEventRequestBody keeps every field loosely typed: signature and
      timestamp presence decides request origin, and the origin disambiguator
      validates the request together with the signed pair
    - Vote bodies are the bare JSON strings "Accept" / "Reject" (see Acceptance)
"""

from typing import Any

from pydantic import BaseModel

from ledger_gateway.schemas.event import Payload


class PostSubjectBody(BaseModel):
    """Create a subject under an existing governance."""
    governance_id: str
    schema_id: str
    namespace: str
    payload: Payload


class PostGovernanceBody(BaseModel):
    """Create a governance — id and schema are implicit."""
    payload: Payload


class PostEventBody(BaseModel):
    """Payload to simulate against a subject."""
    payload: Payload


class PostEventRequestBody(BaseModel):
    """Event request submission, local (bare) or external (pre-signed)."""
    request: Any = None
    timestamp: Any = None
    signature: Any = None
    approvals: Any = None
