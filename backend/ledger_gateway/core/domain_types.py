"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SubjectId, RequestId, DigestId wrap str — identifiers are opaque digests
    - SerialNumber is a zero-based, contiguous, per-subject counter (0..2**64-1)
    - All tagged variants encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums whose values are the wire tags: serialize without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SubjectId = NewType("SubjectId", str)
RequestId = NewType("RequestId", str)
DigestId = NewType("DigestId", str)


# ─── Value Types ─────────────────────────────────────────────────

SerialNumber = NewType("SerialNumber", int)

MAX_U64 = 2**64 - 1


# ─── Enums ───────────────────────────────────────────────────────

class Acceptance(str, Enum):
    """Binary vote cast against a pending request."""
    ACCEPT = "Accept"
    REJECT = "Reject"


class PayloadKind(str, Enum):
    """How an event payload changes subject state."""
    JSON = "Json"
    JSON_PATCH = "JsonPatch"


class RequestKind(str, Enum):
    """Event request variants."""
    CREATE = "Create"
    STATE = "State"
