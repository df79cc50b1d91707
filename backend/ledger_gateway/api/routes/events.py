"""Event Routes — a subject's event history, single events, signatures, simulation.

Invariants:
    - sn path segments parsed by parse_sn: non-digits → 400 REQUEST_ERROR
    - Single-event endpoints narrow the paginated events query (from=sn, quantity=1)
    - Simulation never appends: 202 with the would-be event content
"""

from fastapi import APIRouter, Depends, Query, status

from ledger_gateway.api.dependencies import get_gateway, require_api_key
from ledger_gateway.core.normalize_params import (
    parse_pagination, parse_sn, require_id,
)
from ledger_gateway.schemas.bodies import PostEventBody
from ledger_gateway.schemas.event import (
    Event, EventContent, EventRequestType, Signature,
)
from ledger_gateway.services.node_gateway import NodeGateway

router = APIRouter(
    prefix="/api/subjects/{subject_id}/events", tags=["events"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=list[Event])
async def list_events(
    subject_id: str,
    from_: str | None = Query(None, alias="from"),
    quantity: str | None = Query(None),
    gateway: NodeGateway = Depends(get_gateway),
):
    """List a subject's events starting at sn `from`."""
    subject_id = require_id(subject_id, "id")
    return await gateway.list_events(subject_id, parse_pagination(from_, quantity))


@router.post(
    "/simulated", response_model=EventContent,
    status_code=status.HTTP_202_ACCEPTED,
)
async def simulate_event(
    subject_id: str, body: PostEventBody,
    gateway: NodeGateway = Depends(get_gateway),
):
    """Compute the next event for a payload without appending it."""
    return await gateway.simulate_event(require_id(subject_id, "id"), body.payload)


@router.get("/{sn}", response_model=Event)
async def get_event(
    subject_id: str, sn: str, gateway: NodeGateway = Depends(get_gateway),
):
    """Fetch one event by serial number."""
    subject_id = require_id(subject_id, "id")
    return await gateway.get_event(subject_id, parse_sn(sn))


@router.get("/{sn}/signatures", response_model=list[Signature])
async def list_signatures(
    subject_id: str,
    sn: str,
    from_: str | None = Query(None, alias="from"),
    quantity: str | None = Query(None),
    gateway: NodeGateway = Depends(get_gateway),
):
    """List the signatures collected for one event."""
    subject_id = require_id(subject_id, "id")
    return await gateway.list_signatures(
        subject_id, parse_sn(sn), parse_pagination(from_, quantity),
    )


@router.get("/{sn}/properties", response_model=EventRequestType)
async def get_event_properties(
    subject_id: str, sn: str, gateway: NodeGateway = Depends(get_gateway),
):
    """Decoded request that produced one event."""
    subject_id = require_id(subject_id, "id")
    return await gateway.get_event_properties(subject_id, parse_sn(sn))
