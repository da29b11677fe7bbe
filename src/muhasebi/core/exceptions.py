"""Core domain exceptions for Muhasebi."""

from uuid import UUID

from muhasebi.utils.exceptions import MuhasebiError


class ContextNotSetError(MuhasebiError):
    """Raised when attempting to access request context that is not set.

    This error indicates a programming error - operations requiring context
    are being called outside of a request_context() context manager.
    """

    def __init__(self, message: str = "Request context is not set"):
        super().__init__(message)


class NotFoundError(MuhasebiError):
    """Raised when a requested resource does not exist for the tenant.

    Attributes:
        resource: Kind of resource that was looked up (e.g., "document_risk_score")
        resource_id: Identifier that was looked up, if any
    """

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        resource_id: UUID | str | None = None,
    ):
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id

    def __str__(self) -> str:
        return str(self.args[0])


class ValidationError(MuhasebiError):
    """Raised for user-correctable failures.

    Not to be confused with pydantic's ValidationError, which covers
    malformed request payloads.
    """

    def __str__(self) -> str:
        return str(self.args[0])


class UsageLimitExceededError(ValidationError):
    """Raised when a tenant has used up its plan allowance for a metric.

    Attributes:
        tenant_id: Tenant that hit the ceiling
        metric: The usage metric that is exhausted
        limit: Ceiling of the tenant's plan for that metric
    """

    def __init__(
        self,
        message: str,
        tenant_id: UUID | str,
        metric: str,
        limit: int,
    ):
        super().__init__(message)
        self.tenant_id = tenant_id
        self.metric = metric
        self.limit = limit


class InvalidTenantError(MuhasebiError):
    """Raised when the X-Tenant-ID header is missing or malformed."""

    def __init__(self, reason: str = "Missing X-Tenant-ID header"):
        super().__init__(reason)
        self.reason = reason
