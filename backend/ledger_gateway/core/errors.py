"""Error Hierarchy — the closed, wire-visible failure taxonomy of the gateway.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries exactly one HTTP status; the set of statuses is 400/401/404/500
    - to_response() produces the REST envelope; no internal details leaked in messages

Design Decisions:
    - Single hierarchy with GatewayError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: request coordinates for observability without
      coupling to the logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    REQUEST = "request"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request coordinates attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    subject_id: str | None = None
    request_id: str | None = None
    sn: int | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "subject_id": self.context.subject_id,
                    "request_id": self.context.request_id,
                    "sn": self.context.sn,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class RequestError(GatewayError):
    """Malformed path or query parameter, detected before any domain call."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REQUEST_ERROR", ErrorCategory.REQUEST,
            ErrorSeverity.WARNING, context, 400,
        )


class InvalidParametersError(GatewayError):
    """Well-formed but semantically invalid input."""
    def __init__(
        self, message: str = "Invalid parameters",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_PARAMETERS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class NotFoundError(GatewayError):
    """Requested entity does not exist."""
    def __init__(
        self, message: str = "Not found", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class NotEnoughPermissionsError(GatewayError):
    """The node rejected an event on authorization or business-rule grounds."""
    def __init__(self, cause: str, context: ErrorContext | None = None):
        super().__init__(
            f"Event creation rejected: {cause}",
            "NOT_ENOUGH_PERMISSIONS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.cause = cause


class UnauthorizedError(GatewayError):
    """Missing or unknown API key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Missing or invalid API key",
            "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Internal Errors (500-level) ────────────────────────────────

class ExecutionError(GatewayError):
    """Any node failure not covered by the categories above."""
    def __init__(
        self, message: str = "Execution error",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "EXECUTION_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
