"""Node Gateway — one node operation per capability, with single-sourced error mapping.

Invariants:
    - Every capability method awaits exactly one node call
    - Every node call goes through _invoke, which turns NodeError into GatewayError
    - No retries, no caching, no mutation of request data after dispatch
    - Governance reads reject subjects whose governance_id is non-empty (404)

Design Decisions:
    - Explicit methods over a string-keyed dict: each capability is visible and
      typed (ADR: no convention-over-config)
    - Single-item endpoints (event by sn, event properties) narrow the paginated
      events query instead of asking the node for a dedicated lookup
"""

import logging
from collections.abc import Awaitable
from typing import TypeVar

from pydantic import ValidationError

from ledger_gateway.core.domain_types import Acceptance
from ledger_gateway.core.error_mapping import to_gateway_error
from ledger_gateway.core.errors import ErrorContext, ExecutionError, NotFoundError
from ledger_gateway.core.node_protocol import NodeAPI, NodeError
from ledger_gateway.core.normalize_params import Pagination
from ledger_gateway.core.request_origin import (
    ExternallyOriginated, RequestOrigin, SelfOriginated,
)
from ledger_gateway.schemas.event import (
    Event, EventContent, EventRequestType, Payload, Signature,
)
from ledger_gateway.schemas.subject import PendingRequest, RequestData, SubjectData
from ledger_gateway.services.single_item import fetch_single

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NodeGateway:
    """Dispatches validated inputs to the node and classifies its failures."""

    def __init__(self, node: NodeAPI, namespace: str = ""):
        self._node = node
        self._namespace = namespace

    async def _invoke(self, operation: Awaitable[T]) -> T:
        try:
            return await operation
        except NodeError as e:
            raise to_gateway_error(e) from e

    # ─── Subjects ────────────────────────────────────────────────

    async def get_subject(self, subject_id: str) -> SubjectData:
        return await self._invoke(self._node.get_subject(subject_id))

    async def list_subjects(self, page: Pagination) -> list[SubjectData]:
        return await self._invoke(self._node.get_all_subjects(
            self._namespace, page.from_, page.quantity,
        ))

    async def create_subject(
        self, governance_id: str, schema_id: str, namespace: str,
        payload: Payload,
    ) -> RequestData:
        return await self._invoke(self._node.create_subject(
            governance_id, schema_id, namespace, payload,
        ))

    # ─── Requests & approvals ────────────────────────────────────

    async def submit_request(self, origin: RequestOrigin) -> RequestData:
        """Forward a classified submission to the matching node operation."""
        if isinstance(origin, SelfOriginated):
            operation = self._node.create_request(origin.request)
            kind = "self"
        elif isinstance(origin, ExternallyOriginated):
            operation = self._node.external_request(origin.request)
            kind = "external"
        else:
            raise TypeError(f"Unknown request origin: {origin!r}")
        data = await self._invoke(operation)
        logger.info(
            f"Event request {data.request_id} accepted",
            extra={"origin": kind, "request_id": data.request_id},
        )
        return data

    async def list_pending(self) -> list[PendingRequest]:
        return await self._invoke(self._node.get_pending_requests())

    async def get_pending(self, request_id: str) -> PendingRequest:
        return await self._invoke(self._node.get_single_request(request_id))

    async def vote(
        self, request_id: str, acceptance: Acceptance,
    ) -> PendingRequest:
        return await self._invoke(
            self._node.approval_request(request_id, acceptance),
        )

    # ─── Governances ─────────────────────────────────────────────

    async def get_governance(self, governance_id: str) -> SubjectData:
        """Subject read accepted only when the subject is a governance."""
        subject = await self._invoke(self._node.get_subject(governance_id))
        if not subject.is_governance:
            raise NotFoundError(
                "this id is not a governance",
                ErrorContext(subject_id=governance_id),
            )
        return subject

    async def list_governances(self) -> list[SubjectData]:
        return await self._invoke(self._node.get_all_governances())

    async def create_governance(self, payload: Payload) -> RequestData:
        return await self._invoke(self._node.create_governance(payload))

    # ─── Events & signatures ─────────────────────────────────────

    async def list_events(
        self, subject_id: str, page: Pagination,
    ) -> list[Event]:
        return await self._invoke(self._node.get_events_of_subject(
            subject_id, page.from_, page.quantity,
        ))

    async def get_event(self, subject_id: str, sn: int) -> Event:
        return await fetch_single(self._events_window(subject_id), sn)

    async def simulate_event(
        self, subject_id: str, payload: Payload,
    ) -> EventContent:
        return await self._invoke(
            self._node.simulate_event(subject_id, payload),
        )

    async def list_signatures(
        self, subject_id: str, sn: int, page: Pagination,
    ) -> list[Signature]:
        return await self._invoke(self._node.get_signatures(
            subject_id, sn, page.from_, page.quantity,
        ))

    async def get_event_properties(
        self, subject_id: str, sn: int,
    ) -> EventRequestType:
        """Decoded request that produced the event at sn."""
        event = await fetch_single(self._events_window(subject_id), sn)
        try:
            return EventRequestType.model_validate(
                event.event_content.event_request.request,
            )
        except (AttributeError, ValidationError) as e:
            raise ExecutionError(
                "Event request could not be decoded",
                ErrorContext(subject_id=subject_id, sn=sn),
            ) from e

    def _events_window(self, subject_id: str):
        async def query(from_: int, quantity: int) -> list[Event]:
            return await self._invoke(self._node.get_events_of_subject(
                subject_id, from_, quantity,
            ))
        return query
