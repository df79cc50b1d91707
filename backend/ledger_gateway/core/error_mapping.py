"""Error Mapper — node failures into the gateway's wire taxonomy.

Invariants:
    - Total: every NodeError maps to exactly one GatewayError
    - Resolution walks the error's MRO against a fixed table, so the result does
      not depend on table order; unknown subclasses fall back to ExecutionError
    - Node errors are reclassified, never retried or reinterpreted

Design Decisions:
    - EventCreationError collapses to NOT_ENOUGH_PERMISSIONS; the node's cause
      survives only in the message (ADR: no invented sub-reasons)
    - VoteNotNeeded surfaces as a REQUEST_ERROR carrying the node's message
"""

from collections.abc import Callable

from ledger_gateway.core.errors import (
    ExecutionError,
    GatewayError,
    InvalidParametersError,
    NotEnoughPermissionsError,
    NotFoundError,
    RequestError,
)
from ledger_gateway.core.node_protocol import (
    EventCreationError,
    NodeError,
    NodeInvalidParameters,
    NodeNotFound,
    VoteNotNeeded,
)

_MAPPING: dict[type[NodeError], Callable[[NodeError], GatewayError]] = {
    NodeInvalidParameters: lambda e: InvalidParametersError(),
    NodeNotFound: lambda e: NotFoundError(e.reason),
    EventCreationError: lambda e: NotEnoughPermissionsError(e.cause),
    VoteNotNeeded: lambda e: RequestError(e.message),
}


def to_gateway_error(error: NodeError) -> GatewayError:
    """Classify a node failure."""
    for cls in type(error).__mro__:
        build = _MAPPING.get(cls)
        if build is not None:
            return build(error)
    return ExecutionError()
