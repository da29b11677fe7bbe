"""Subscription plans and usage-limit enforcement."""

from muhasebi.billing.plans import PLAN_CONFIGS, PlanConfig, get_plan_config
from muhasebi.billing.subscription import SubscriptionService, TenantSubscriptionView
from muhasebi.billing.usage import (
    LIMIT_EXCEEDED_MESSAGES,
    LimitCheckResult,
    MetricUsage,
    UsagePeriod,
    UsagePlanLimiter,
    UsageSummary,
)

__all__ = [
    "LIMIT_EXCEEDED_MESSAGES",
    "PLAN_CONFIGS",
    "LimitCheckResult",
    "MetricUsage",
    "PlanConfig",
    "SubscriptionService",
    "TenantSubscriptionView",
    "UsagePeriod",
    "UsagePlanLimiter",
    "UsageSummary",
    "get_plan_config",
]
