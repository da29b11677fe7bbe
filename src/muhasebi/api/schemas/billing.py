"""API schemas for billing endpoints.

Subscription payloads keep valid_until/trial_until in snake_case while the
limits and usage blocks are camelCase, as existing clients expect.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from muhasebi.api.schemas.common import CamelModel
from muhasebi.billing.plans import PlanConfig
from muhasebi.billing.subscription import TenantSubscriptionView
from muhasebi.billing.usage import LimitCheckResult, MetricUsage, UsageSummary
from muhasebi.db.models.billing import SubscriptionPlan, SubscriptionStatus, UsageMetricType


class PlanLimitsResponse(CamelModel):
    """Ceilings of a subscription plan."""

    max_client_companies: int
    max_documents_per_month: int
    max_ai_analyses_per_month: int
    max_users: int
    max_scheduled_reports: int

    @classmethod
    def from_config(cls, config: PlanConfig) -> "PlanLimitsResponse":
        return cls(
            max_client_companies=config.max_client_companies,
            max_documents_per_month=config.max_documents_per_month,
            max_ai_analyses_per_month=config.max_ai_analyses_per_month,
            max_users=config.max_users,
            max_scheduled_reports=config.max_scheduled_reports,
        )


class SubscriptionResponse(BaseModel):
    """A tenant's subscription with its plan limits."""

    plan: SubscriptionPlan
    status: SubscriptionStatus
    valid_until: datetime | None = None
    trial_until: datetime | None = None
    limits: PlanLimitsResponse

    @classmethod
    def from_view(cls, view: TenantSubscriptionView) -> "SubscriptionResponse":
        return cls(
            plan=view.plan,
            status=view.status,
            valid_until=view.valid_until,
            trial_until=view.trial_until,
            limits=PlanLimitsResponse.from_config(view.plan_config),
        )


class SubscriptionUpdateRequest(BaseModel):
    """Fields of a subscription to change; omitted fields stay as they are."""

    plan: SubscriptionPlan | None = None
    status: SubscriptionStatus | None = None
    valid_until: datetime | None = Field(default=None, description="null clears the date")
    trial_until: datetime | None = Field(default=None, description="null clears the date")

    model_config = {"extra": "forbid"}


class MetricUsageResponse(CamelModel):
    used: int
    limit: int
    remaining: int

    @classmethod
    def from_usage(cls, usage: MetricUsage) -> "MetricUsageResponse":
        return cls(used=usage.used, limit=usage.limit, remaining=usage.remaining)


class UsageResponse(CamelModel):
    """Consumption of every metric in the current month."""

    client_companies: MetricUsageResponse
    documents: MetricUsageResponse
    ai_analyses: MetricUsageResponse
    users: MetricUsageResponse
    scheduled_reports: MetricUsageResponse

    @classmethod
    def from_summary(cls, summary: UsageSummary) -> "UsageResponse":
        return cls(
            client_companies=MetricUsageResponse.from_usage(summary[UsageMetricType.CLIENT_COMPANIES]),
            documents=MetricUsageResponse.from_usage(summary[UsageMetricType.DOCUMENTS]),
            ai_analyses=MetricUsageResponse.from_usage(summary[UsageMetricType.AI_ANALYSES]),
            users=MetricUsageResponse.from_usage(summary[UsageMetricType.USERS]),
            scheduled_reports=MetricUsageResponse.from_usage(summary[UsageMetricType.SCHEDULED_REPORTS]),
        )


class LimitCheckResponse(CamelModel):
    metric: UsageMetricType
    allowed: bool
    remaining: int
    limit: int

    @classmethod
    def from_result(cls, metric: UsageMetricType, result: LimitCheckResult) -> "LimitCheckResponse":
        return cls(metric=metric, allowed=result.allowed, remaining=result.remaining, limit=result.limit)
