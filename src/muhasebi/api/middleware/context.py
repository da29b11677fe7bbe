"""Request context middleware for propagating context through the request lifecycle."""

from typing import Callable
from uuid import UUID

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from uuid_utils.compat import uuid7

from muhasebi.core.context import create_context, request_context
from muhasebi.core.exceptions import InvalidTenantError

# Paths that don't require request context
SKIP_CONTEXT_PATHS = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that sets up RequestContext for each request.

    Reads the tenant from the X-Tenant-ID header and runs the rest of the
    request inside a ContextVar-based RequestContext.

    Sets:
        request.state.request_id: The generated request ID (UUIDv7)
        request.state.tenant_id: UUID of the tenant
        X-Request-ID response header: For client correlation

    Raises:
        InvalidTenantError: If the tenant header is missing or not a UUID
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request within a RequestContext."""
        request_id = uuid7()
        request.state.request_id = request_id

        if self._should_skip_context(request.url.path):
            response = await call_next(request)
            response.headers["X-Request-ID"] = str(request_id)
            return response

        tenant_id = self._get_tenant_id(request)
        request.state.tenant_id = tenant_id

        correlation_id = self._get_correlation_id(request)
        ctx = create_context(
            tenant_id=tenant_id,
            request_id=request_id,
            correlation_id=correlation_id,
        )

        with request_context(ctx):
            response = await call_next(request)

        response.headers["X-Request-ID"] = str(request_id)
        response.headers["X-Correlation-ID"] = str(ctx.correlation_id)

        return response

    def _should_skip_context(self, path: str) -> bool:
        """Check if path should skip context setup."""
        return path in SKIP_CONTEXT_PATHS or path.startswith(("/docs", "/redoc"))

    def _get_tenant_id(self, request: Request) -> UUID:
        """Extract tenant ID from the X-Tenant-ID header."""
        tenant_header = request.headers.get("X-Tenant-ID")
        if not tenant_header:
            raise InvalidTenantError("Missing X-Tenant-ID header")
        try:
            return UUID(tenant_header)
        except ValueError:
            raise InvalidTenantError("Invalid X-Tenant-ID format: must be a valid UUID") from None

    def _get_correlation_id(self, request: Request) -> UUID | None:
        """Reuse the caller's X-Correlation-ID when it is a valid UUID."""
        header = request.headers.get("X-Correlation-ID")
        if not header:
            return None
        try:
            return UUID(header)
        except ValueError:
            return None
