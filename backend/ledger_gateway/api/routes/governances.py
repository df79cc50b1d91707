"""Governance Routes — governance-only reads and governance creation.

Invariants:
    - GET /api/governances/{id} answers 404 when the id is a plain subject
    - POST takes only a payload; id and schema are assigned by the node
"""

from fastapi import APIRouter, Depends, status

from ledger_gateway.api.dependencies import get_gateway, require_api_key
from ledger_gateway.core.normalize_params import require_id
from ledger_gateway.schemas.bodies import PostGovernanceBody
from ledger_gateway.schemas.subject import RequestData, SubjectData
from ledger_gateway.services.node_gateway import NodeGateway

router = APIRouter(
    prefix="/api/governances", tags=["governances"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/{governance_id}", response_model=SubjectData)
async def get_governance(
    governance_id: str, gateway: NodeGateway = Depends(get_gateway),
):
    """Fetch one governance."""
    return await gateway.get_governance(require_id(governance_id, "id"))


@router.get("", response_model=list[SubjectData])
async def list_governances(gateway: NodeGateway = Depends(get_gateway)):
    return await gateway.list_governances()


@router.post(
    "", response_model=RequestData, status_code=status.HTTP_202_ACCEPTED,
)
async def create_governance(
    body: PostGovernanceBody, gateway: NodeGateway = Depends(get_gateway),
):
    """Create a governance from its initial payload."""
    return await gateway.create_governance(body.payload)
