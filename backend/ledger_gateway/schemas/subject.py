"""Subject Schemas — subject state, pending requests and submission receipts.

Invariants:
    - SubjectData.governance_id is empty iff the subject is a governance
    - SubjectData.properties is JSON text (opaque to the gateway)
"""

from pydantic import BaseModel, Field

from ledger_gateway.schemas.event import EventRequest


class SubjectData(BaseModel):
    """Current state of a subject."""
    subject_id: str
    governance_id: str
    sn: int = Field(ge=0)
    public_key: str
    namespace: str
    schema_id: str
    owner: str
    properties: str

    @property
    def is_governance(self) -> bool:
        return not self.governance_id


class PendingRequest(BaseModel):
    """An event request awaiting approval votes."""
    request_id: str
    request: EventRequest


class RequestData(BaseModel):
    """Receipt returned by every accepted submission."""
    request_id: str
    subject_id: str | None = None
