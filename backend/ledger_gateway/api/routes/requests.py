"""Request Routes — event request submission.

Invariants:
    - Origin decided once by classify_request before any node call:
      bare → node signs it; signature + timestamp → external; anything else → 400
"""

from fastapi import APIRouter, Depends, status

from ledger_gateway.api.dependencies import get_gateway, require_api_key
from ledger_gateway.core.request_origin import classify_request
from ledger_gateway.schemas.bodies import PostEventRequestBody
from ledger_gateway.schemas.subject import RequestData
from ledger_gateway.services.node_gateway import NodeGateway

router = APIRouter(
    prefix="/api/requests", tags=["requests"],
    dependencies=[Depends(require_api_key)],
)


@router.post(
    "", response_model=RequestData, status_code=status.HTTP_202_ACCEPTED,
)
async def submit_event_request(
    body: PostEventRequestBody, gateway: NodeGateway = Depends(get_gateway),
):
    """Submit a local or pre-signed external event request."""
    return await gateway.submit_request(classify_request(body))
