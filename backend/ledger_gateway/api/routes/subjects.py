"""Subject Routes — read, list and create subjects.

Invariants:
    - GET /api/subjects lists only the configured namespace, paginated by from/quantity
    - POST /api/subjects answers 202: the node accepted the create request
"""

from fastapi import APIRouter, Depends, Query, status

from ledger_gateway.api.dependencies import get_gateway, require_api_key
from ledger_gateway.core.normalize_params import parse_pagination, require_id
from ledger_gateway.schemas.bodies import PostSubjectBody
from ledger_gateway.schemas.subject import RequestData, SubjectData
from ledger_gateway.services.node_gateway import NodeGateway

router = APIRouter(
    prefix="/api/subjects", tags=["subjects"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/{subject_id}", response_model=SubjectData)
async def get_subject(
    subject_id: str, gateway: NodeGateway = Depends(get_gateway),
):
    """Fetch one subject."""
    return await gateway.get_subject(require_id(subject_id, "id"))


@router.get("", response_model=list[SubjectData])
async def list_subjects(
    from_: str | None = Query(None, alias="from"),
    quantity: str | None = Query(None),
    gateway: NodeGateway = Depends(get_gateway),
):
    """List subjects of the configured namespace."""
    return await gateway.list_subjects(parse_pagination(from_, quantity))


@router.post(
    "", response_model=RequestData, status_code=status.HTTP_202_ACCEPTED,
)
async def create_subject(
    body: PostSubjectBody, gateway: NodeGateway = Depends(get_gateway),
):
    """Create a subject under an existing governance."""
    return await gateway.create_subject(
        body.governance_id, body.schema_id, body.namespace, body.payload,
    )
