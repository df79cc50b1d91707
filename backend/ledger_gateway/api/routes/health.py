"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/health/ always returns 200 if process is up (liveness)
    - GET /api/health/ready returns 503 if the node is unreachable (readiness)
    - No API key required

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ledger_gateway.api.dependencies import get_node
from ledger_gateway.core.node_protocol import NodeAPI

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "ledger-gateway",
        "version": "0.1.0",
    }


@router.get("/ready")
async def readiness_check(node: NodeAPI = Depends(get_node)):
    """Readiness probe — includes node connectivity."""
    if not await node.health_check():
        logger.warning("Readiness check failed: node unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "node_unavailable",
            },
        )
    return {"status": "ready", "checks": {"node": "healthy"}}
