"""Database models for Muhasebi."""

from .base import Base, TimestampMixin
from .billing import (
    SubscriptionPlan,
    SubscriptionStatus,
    TenantSubscription,
    TenantUsage,
    UsageMetricType,
)
from .risk import (
    ClientCompanyRiskScore,
    DocumentRiskScore,
    RiskAlert,
    RiskEntityType,
    RiskScoreHistory,
    RiskSeverity,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "ClientCompanyRiskScore",
    "DocumentRiskScore",
    "RiskAlert",
    "RiskEntityType",
    "RiskScoreHistory",
    "RiskSeverity",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "TenantSubscription",
    "TenantUsage",
    "UsageMetricType",
]
