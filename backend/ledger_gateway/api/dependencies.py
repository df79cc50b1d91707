"""API Dependencies — node access, gateway construction and the API key filter.

Invariants:
    - The node instance lives on app.state (set by the lifespan or by tests
      through dependency_overrides on get_node)
    - The API key is opaque: only presence is required, plus membership when
      api_keys is configured

Design Decisions:
    - NodeGateway built per request: it holds no state beyond the node reference
"""

from fastapi import Depends, Header, Request

from ledger_gateway.config import get_settings
from ledger_gateway.core.errors import UnauthorizedError
from ledger_gateway.core.node_protocol import NodeAPI
from ledger_gateway.services.node_gateway import NodeGateway


def get_node(request: Request) -> NodeAPI:
    """FastAPI dependency for the ledger node."""
    node = getattr(request.app.state, "node", None)
    if node is None:
        raise RuntimeError("Node not initialized")
    return node


def get_gateway(node: NodeAPI = Depends(get_node)) -> NodeGateway:
    return NodeGateway(node, namespace=get_settings().subjects_namespace)


async def require_api_key(
    x_api_key: str | None = Header(None, alias="X-API-KEY"),
) -> str:
    """Reject calls without a usable API key (401)."""
    if not x_api_key:
        raise UnauthorizedError()
    allowed = get_settings().api_keys
    if allowed and x_api_key not in allowed:
        raise UnauthorizedError()
    return x_api_key
