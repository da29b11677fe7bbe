"""Error handling middleware for mapping exceptions to HTTP responses."""

from datetime import UTC, datetime
from typing import Callable
from uuid import UUID

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from muhasebi.api.schemas.errors import APIError, ErrorCode
from muhasebi.core.exceptions import (
    ContextNotSetError,
    InvalidTenantError,
    NotFoundError,
    UsageLimitExceededError,
    ValidationError,
)
from muhasebi.core.logging import log_exception

logger = structlog.get_logger("muhasebi.api.errors")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware that catches exceptions and returns standardized error responses.

    Maps domain exceptions to appropriate HTTP status codes and formats
    all errors using the APIError schema.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and handle any exceptions."""
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert exception to JSON error response."""
        request_id = self._get_request_id(request)
        status_code, error_code, message, details = self._map_exception(exc)

        if status_code >= 500:
            log_exception(logger, exc, event="unhandled_exception", path=request.url.path)

        error = APIError(
            error_code=error_code,
            message=message,
            details=details,
            request_id=request_id,
            timestamp=datetime.now(UTC),
        )

        return JSONResponse(
            status_code=status_code,
            content=error.model_dump(mode="json"),
            headers={"X-Request-ID": request_id},
        )

    def _get_request_id(self, request: Request) -> str:
        """Extract request ID from state or generate placeholder."""
        if hasattr(request.state, "request_id"):
            rid = request.state.request_id
            return str(rid) if isinstance(rid, UUID) else rid
        return "unknown"

    def _map_exception(
        self, exc: Exception
    ) -> tuple[int, str, str, dict | None]:
        """Map exception to (status_code, error_code, message, details)."""
        if isinstance(exc, NotFoundError):
            details = None
            if exc.resource is not None:
                details = {"resource": exc.resource, "resource_id": str(exc.resource_id)}
            return (404, ErrorCode.NOT_FOUND.value, str(exc), details)

        if isinstance(exc, UsageLimitExceededError):
            return (
                400,
                ErrorCode.VALIDATION_ERROR.value,
                str(exc),
                {"metric": exc.metric, "limit": exc.limit},
            )

        if isinstance(exc, ValidationError):
            return (400, ErrorCode.VALIDATION_ERROR.value, str(exc), None)

        if isinstance(exc, InvalidTenantError):
            return (400, ErrorCode.INVALID_REQUEST.value, exc.reason, None)

        # Validation errors (Pydantic)
        if isinstance(exc, PydanticValidationError):
            return (
                422,
                ErrorCode.VALIDATION_ERROR.value,
                "Request validation failed",
                {"errors": exc.errors(include_url=False, include_context=False)},
            )

        # Context errors (internal)
        if isinstance(exc, ContextNotSetError):
            return (
                500,
                ErrorCode.INTERNAL_ERROR.value,
                "Internal server error: context not initialized",
                None,
            )

        return (
            500,
            ErrorCode.INTERNAL_ERROR.value,
            "Internal server error",
            {"type": type(exc).__name__} if self.debug else None,
        )
