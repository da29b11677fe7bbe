"""Request context for async-safe multi-tenant operations.

Every tenant-scoped request runs inside a RequestContext carried by a
ContextVar, so logs and services downstream of the HTTP layer can see the
tenant without it being threaded through every call.

Usage:
    from muhasebi.core.context import create_context, request_context

    ctx = create_context(tenant_id=tenant_uuid)
    with request_context(ctx):
        current = get_current_context()
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_utils.compat import uuid7

from muhasebi.core.exceptions import ContextNotSetError


class RequestContext(BaseModel):
    """Context for a single request/operation."""

    request_id: UUID = Field(default_factory=uuid7)
    tenant_id: UUID
    correlation_id: UUID = Field(default_factory=uuid7)
    initiated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}

    def to_log_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for structured log entries."""
        return {
            "request_id": str(self.request_id),
            "tenant_id": str(self.tenant_id),
            "correlation_id": str(self.correlation_id),
        }


_request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def get_current_context() -> RequestContext:
    """Get the current request context.

    Raises:
        ContextNotSetError: If no context is set in the current execution context
    """
    ctx = _request_context.get()
    if ctx is None:
        raise ContextNotSetError(
            "No request context is set. Use request_context() context manager."
        )
    return ctx


def get_current_context_or_none() -> RequestContext | None:
    """Get the current request context, or None if not set."""
    return _request_context.get()


def set_context(ctx: RequestContext) -> Token[RequestContext | None]:
    """Set the request context and return a token for restoration.

    This is a low-level API. Prefer using the request_context() context manager.
    """
    return _request_context.set(ctx)


def reset_context(token: Token[RequestContext | None]) -> None:
    """Reset the context to its previous value using a token."""
    _request_context.reset(token)


@contextmanager
def request_context(ctx: RequestContext):
    """Context manager for setting request context.

    Works for both sync and async code because contextvars are
    propagated to async tasks.

    Args:
        ctx: The context to set for the duration of the block

    Yields:
        The context that was set
    """
    token = set_context(ctx)
    try:
        yield ctx
    finally:
        reset_context(token)


def create_context(
    *,
    tenant_id: UUID,
    request_id: UUID | None = None,
    correlation_id: UUID | None = None,
) -> RequestContext:
    """Factory function to create a RequestContext with defaults."""
    return RequestContext(
        tenant_id=tenant_id,
        request_id=request_id or uuid7(),
        correlation_id=correlation_id or uuid7(),
    )
