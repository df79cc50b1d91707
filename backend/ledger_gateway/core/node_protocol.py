"""Node Protocol — contract between the gateway and the ledger node it fronts.

Invariants:
    - The gateway never imports a node implementation — only this Protocol
    - Every operation is async and either returns a typed value or raises NodeError
    - NodeError subclasses are the node's whole failure vocabulary; anything
      else raised by a node is a bug, not a domain outcome

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Exceptions over Result values: the mapping to wire errors is single-sourced
      in core/error_mapping.py
"""

from typing import Protocol

from ledger_gateway.core.domain_types import Acceptance
from ledger_gateway.schemas.event import (
    Event, EventContent, EventRequest, EventRequestType, Payload, Signature,
)
from ledger_gateway.schemas.subject import PendingRequest, RequestData, SubjectData


# ─── Node Errors ────────────────────────────────────────────────

class NodeError(Exception):
    """Base class for failures reported by the node."""


class NodeInvalidParameters(NodeError):
    """The node rejected the arguments."""


class NodeNotFound(NodeError):
    """The requested entity does not exist."""
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class EventCreationError(NodeError):
    """The node refused to create the event."""
    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause


class VoteNotNeeded(NodeError):
    """The request no longer accepts votes."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ─── Contract ───────────────────────────────────────────────────

class NodeAPI(Protocol):
    """Operations the gateway consumes — implemented by the node."""

    async def get_subject(self, subject_id: str) -> SubjectData: ...
    async def get_all_subjects(
        self, namespace: str, from_: int | None, quantity: int | None,
    ) -> list[SubjectData]: ...
    async def get_all_governances(self) -> list[SubjectData]: ...
    async def create_subject(
        self, governance_id: str, schema_id: str, namespace: str,
        payload: Payload,
    ) -> RequestData: ...
    async def create_governance(self, payload: Payload) -> RequestData: ...

    async def create_request(self, request: EventRequestType) -> RequestData: ...
    async def external_request(self, request: EventRequest) -> RequestData: ...

    async def get_pending_requests(self) -> list[PendingRequest]: ...
    async def get_single_request(self, request_id: str) -> PendingRequest: ...
    async def approval_request(
        self, request_id: str, acceptance: Acceptance,
    ) -> PendingRequest: ...

    async def get_events_of_subject(
        self, subject_id: str, from_: int | None, quantity: int | None,
    ) -> list[Event]: ...
    async def simulate_event(
        self, subject_id: str, payload: Payload,
    ) -> EventContent: ...
    async def get_signatures(
        self, subject_id: str, sn: int, from_: int | None, quantity: int | None,
    ) -> list[Signature]: ...

    async def health_check(self) -> bool: ...
