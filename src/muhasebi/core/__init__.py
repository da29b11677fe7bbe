"""Core services and utilities for Muhasebi."""

from .context import (
    RequestContext,
    create_context,
    get_current_context,
    get_current_context_or_none,
    request_context,
    reset_context,
    set_context,
)
from .exceptions import (
    ContextNotSetError,
    InvalidTenantError,
    NotFoundError,
    UsageLimitExceededError,
    ValidationError,
)

__all__ = [
    # Context
    "RequestContext",
    "create_context",
    "get_current_context",
    "get_current_context_or_none",
    "request_context",
    "reset_context",
    "set_context",
    # Exceptions
    "ContextNotSetError",
    "InvalidTenantError",
    "NotFoundError",
    "UsageLimitExceededError",
    "ValidationError",
]
