"""Request-Origin Disambiguator — local vs. externally pre-signed event requests.

Invariants:
    - Neither signature nor timestamp → SelfOriginated (node signs it), or
      InvalidParametersError when the request is not a tagged Create/State
    - Both present → ExternallyOriginated, or InvalidParametersError when the
      pair does not convert into a well-formed signed EventRequest
    - Exactly one present → InvalidParametersError (never auto-completed)
    - Decided once per request; the dispatcher never re-inspects the body

Design Decisions:
    - Origins as frozen dataclasses: the dispatcher matches on type, not on
      optional fields
"""

from dataclasses import dataclass

from pydantic import ValidationError

from ledger_gateway.core.errors import InvalidParametersError
from ledger_gateway.schemas.bodies import PostEventRequestBody
from ledger_gateway.schemas.event import EventRequest, EventRequestType


@dataclass(frozen=True)
class SelfOriginated:
    """Bare request the node must timestamp and sign."""
    request: EventRequestType


@dataclass(frozen=True)
class ExternallyOriginated:
    """Request already timestamped and signed by a remote peer."""
    request: EventRequest


RequestOrigin = SelfOriginated | ExternallyOriginated


def classify_request(body: PostEventRequestBody) -> RequestOrigin:
    """Classify a submission by the presence of signature and timestamp."""
    has_signature = body.signature is not None
    has_timestamp = body.timestamp is not None
    if not has_signature and not has_timestamp:
        return SelfOriginated(_to_request(body))
    if has_signature and has_timestamp:
        return ExternallyOriginated(_to_external(body))
    missing = "timestamp" if has_signature else "signature"
    raise InvalidParametersError(
        f"Partially signed event request: '{missing}' is missing",
    )


def _failing_fields(error: ValidationError) -> str:
    fields = {
        ".".join(str(p) for p in err["loc"]) or "request"
        for err in error.errors()
    }
    return ", ".join(sorted(fields))


def _to_request(body: PostEventRequestBody) -> EventRequestType:
    """Structural conversion of a bare request."""
    try:
        return EventRequestType.model_validate(body.request)
    except ValidationError as e:
        raise InvalidParametersError(
            f"Malformed event request: {_failing_fields(e)}",
        ) from e


def _to_external(body: PostEventRequestBody) -> EventRequest:
    """Structural conversion into a fully formed signed request."""
    try:
        return EventRequest.model_validate({
            "request": body.request,
            "timestamp": body.timestamp,
            "signature": body.signature,
            "approvals": body.approvals if body.approvals is not None else [],
        })
    except ValidationError as e:
        raise InvalidParametersError(
            f"Malformed external event request: {_failing_fields(e)}",
        ) from e
