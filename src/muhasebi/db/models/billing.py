"""Subscription and usage counter models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from uuid_utils.compat import uuid7

from .base import Base, PortableUUID, TimestampMixin, UTCDateTime


class SubscriptionPlan(str, Enum):
    """Subscription tier determining resource ceilings."""

    FREE = "FREE"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionStatus(str, Enum):
    """Billing status of a subscription."""

    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELLED = "CANCELLED"


class UsageMetricType(str, Enum):
    """Metered resources tracked per tenant and billing period."""

    CLIENT_COMPANIES = "CLIENT_COMPANIES"
    DOCUMENTS = "DOCUMENTS"
    AI_ANALYSES = "AI_ANALYSES"
    USERS = "USERS"
    SCHEDULED_REPORTS = "SCHEDULED_REPORTS"


class TenantSubscription(Base, TimestampMixin):
    """Subscription of a tenant (one row per tenant)."""

    __tablename__ = "tenant_subscriptions"

    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True)
    plan: Mapped[str] = mapped_column(String(20), nullable=False, default=SubscriptionPlan.FREE.value)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value
    )
    valid_until: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    trial_until: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    def __repr__(self) -> str:
        return f"<TenantSubscription(tenant={self.tenant_id}, plan={self.plan}, status={self.status})>"


class TenantUsage(Base, TimestampMixin):
    """Usage counter for one tenant, metric and billing period."""

    __tablename__ = "tenant_usage"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    metric: Mapped[str] = mapped_column(String(50), nullable=False)
    period_start: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    period_end: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("tenant_id", "metric", "period_start", name="uq_tenant_usage_period"),
        Index("idx_tenant_usage_tenant", "tenant_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<TenantUsage(tenant={self.tenant_id}, metric={self.metric}, "
            f"period_start={self.period_start}, value={self.value})>"
        )
