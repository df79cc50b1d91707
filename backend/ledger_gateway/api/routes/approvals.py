"""Approval Routes — pending requests and votes.

Invariants:
    - PUT body is the bare JSON string "Accept" or "Reject"
    - Voting on an unknown request id → 404 (node NotFound), not 400/500
"""

from fastapi import APIRouter, Body, Depends

from ledger_gateway.api.dependencies import get_gateway, require_api_key
from ledger_gateway.core.domain_types import Acceptance
from ledger_gateway.core.normalize_params import require_id
from ledger_gateway.schemas.subject import PendingRequest
from ledger_gateway.services.node_gateway import NodeGateway

router = APIRouter(
    prefix="/api/approvals", tags=["approvals"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=list[PendingRequest])
async def list_pending_requests(gateway: NodeGateway = Depends(get_gateway)):
    """List requests waiting for a vote."""
    return await gateway.list_pending()


@router.get("/{request_id}", response_model=PendingRequest)
async def get_pending_request(
    request_id: str, gateway: NodeGateway = Depends(get_gateway),
):
    return await gateway.get_pending(require_id(request_id, "id"))


@router.put("/{request_id}", response_model=PendingRequest)
async def vote_request(
    request_id: str,
    acceptance: Acceptance = Body(...),
    gateway: NodeGateway = Depends(get_gateway),
):
    """Cast an Accept/Reject vote on a pending request."""
    return await gateway.vote(require_id(request_id, "id"), acceptance)
