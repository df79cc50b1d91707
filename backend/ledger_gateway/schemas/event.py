"""Event Schemas — event requests, signatures and hash-chained events.

Invariants:
    - Payload and EventRequestType are externally tagged on the wire:
      {"Json": ...} / {"JsonPatch": ...} and {"Create": {...}} / {"State": {...}}
    - The tag alone selects the variant — never inferred from field shapes;
      untagged dicts are rejected, code builds values through of()
    - Payload values are JSON text once validated (non-string JSON is encoded)
    - EventContent.previous_hash is empty only for sn == 0

Design Decisions:
    - before-validator + model_serializer pair keeps the wire tags while the
      Python side works with an explicit kind enum (ADR: exhaustive isinstance
      matching at the boundary)
"""

import json
from typing import Any

from pydantic import BaseModel, Field, model_serializer, model_validator

from ledger_gateway.core.domain_types import Acceptance, PayloadKind, RequestKind


def _single_tag(data: Any, tags: set[str]) -> tuple[str, Any] | None:
    """Return (tag, value) when data is a one-key dict keyed by a known tag."""
    if isinstance(data, dict) and len(data) == 1:
        key, value = next(iter(data.items()))
        if key in tags:
            return key, value
    return None


class Payload(BaseModel):
    """Event payload — full JSON replacement or an RFC 6902 patch."""
    kind: PayloadKind
    value: str

    @model_validator(mode="before")
    @classmethod
    def from_tagged(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        tagged = _single_tag(data, {k.value for k in PayloadKind})
        if tagged is None:
            raise ValueError("payload must be tagged 'Json' or 'JsonPatch'")
        tag, value = tagged
        if not isinstance(value, str):
            value = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return {"kind": tag, "value": value}

    @classmethod
    def of(cls, kind: PayloadKind, value: str) -> "Payload":
        """Build from already-validated parts (bypasses the wire-tag check)."""
        return cls.model_construct(kind=kind, value=value)

    @model_serializer
    def to_tagged(self) -> dict[str, str]:
        return {self.kind.value: self.value}


class CreateRequest(BaseModel):
    """Initializes a subject under a governance."""
    governance_id: str
    schema_id: str
    namespace: str
    payload: Payload


class StateRequest(BaseModel):
    """Mutates an existing subject."""
    subject_id: str = Field(min_length=1)
    payload: Payload


class EventRequestType(BaseModel):
    """Tagged event request: Create or State."""
    variant: CreateRequest | StateRequest

    @model_validator(mode="before")
    @classmethod
    def from_tagged(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        tagged = _single_tag(data, {k.value for k in RequestKind})
        if tagged is None:
            raise ValueError("event request must be tagged 'Create' or 'State'")
        tag, value = tagged
        if tag == RequestKind.CREATE.value:
            return {"variant": CreateRequest.model_validate(value)}
        return {"variant": StateRequest.model_validate(value)}

    @classmethod
    def of(cls, variant: CreateRequest | StateRequest) -> "EventRequestType":
        """Wrap an already-validated variant."""
        return cls.model_construct(variant=variant)

    @model_serializer
    def to_tagged(self) -> dict[str, Any]:
        return {self.kind.value: self.variant.model_dump()}

    @property
    def kind(self) -> RequestKind:
        if isinstance(self.variant, CreateRequest):
            return RequestKind.CREATE
        return RequestKind.STATE

    @property
    def payload(self) -> Payload:
        return self.variant.payload


class SignatureContent(BaseModel):
    signer: str = Field(min_length=1)
    event_content_hash: str = Field(min_length=1)
    timestamp: int = Field(ge=0)


class Signature(BaseModel):
    """Binds a signer to a content hash at a point in time."""
    content: SignatureContent
    signature: str = Field(min_length=1)


class Approval(BaseModel):
    """A vote collected for a pending request."""
    acceptance: Acceptance
    signature: Signature


class EventRequest(BaseModel):
    """A timestamped, signed event request."""
    request: EventRequestType
    timestamp: int = Field(ge=0)
    signature: Signature
    approvals: list[Approval] = Field(default_factory=list)


class Metadata(BaseModel):
    namespace: str
    governance_id: str
    governance_version: int = 0
    schema_id: str
    owner: str


class EventContent(BaseModel):
    subject_id: str
    event_request: EventRequest
    sn: int = Field(ge=0)
    previous_hash: str
    state_hash: str
    metadata: Metadata
    approved: bool


class Event(BaseModel):
    """Immutable, hash-chained state transition of a subject."""
    event_content: EventContent
    signature: Signature
