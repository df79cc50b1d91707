"""Error Handlers — global exception handlers for the gateway API.

Invariants:
    - GatewayError → its own status with the structured envelope
    - RequestValidationError → 400 with field-level error details
    - Starlette HTTPException (unrouted path, wrong method) → same envelope;
      an unrouted /api path with an empty segment is an empty identifier (400
      REQUEST_ERROR)
    - Exception (catch-all) → 500, never leaks internal details
    - Every failure is logged exactly once, here

Design Decisions:
    - Four-layer handler: gateway (GatewayError), routing (HTTPException),
      validation (Pydantic), catch-all (Exception)
    - 4xx logged as warnings, 5xx as errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_gateway.core.errors import (
    ErrorCategory, ErrorSeverity, GatewayError, RequestError,
)
from ledger_gateway.core.normalize_params import has_empty_segment

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_http_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:
    """Register gateway error handler."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Handle all classified gateway errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"GatewayError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "subject_id": exc.context.subject_id,
                "request_id": exc.context.request_id,
                "sn": exc.context.sn,
            },
            exc_info=exc.__cause__ if exc.http_status >= 500 else None,
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing/HTTP error handler (unrouted paths, wrong methods)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Wrap Starlette HTTP errors in the gateway envelope."""
        path = request.url.path
        if (
            exc.status_code == status.HTTP_404_NOT_FOUND
            and path.startswith("/api/") and has_empty_segment(path)
        ):
            error: GatewayError = RequestError(
                "Error in path parameter 'id': empty identifier",
            )
        else:
            error = GatewayError(
                str(exc.detail),
                _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
                ErrorCategory.RESOURCE_NOT_FOUND
                if exc.status_code == status.HTTP_404_NOT_FOUND
                else ErrorCategory.REQUEST,
                ErrorSeverity.WARNING,
                http_status=exc.status_code,
            )
        logger.warning(
            f"HTTP {exc.status_code} on {path}: {error.message}",
            extra={"error_code": error.code, "path": path},
        )
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
            headers=getattr(exc, "headers", None),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
