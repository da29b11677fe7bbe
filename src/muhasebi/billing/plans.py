"""Subscription plan ceilings.

Ceilings are plain integers for every tier. Enterprise is "unlimited" only
in the sense that its numbers are very large; callers never special-case it.
"""

from dataclasses import dataclass
from types import MappingProxyType

from muhasebi.db.models.billing import SubscriptionPlan, UsageMetricType


@dataclass(frozen=True)
class PlanConfig:
    """Resource ceilings of a subscription plan."""

    max_client_companies: int
    max_documents_per_month: int
    max_ai_analyses_per_month: int
    max_users: int
    max_scheduled_reports: int

    def limit_for(self, metric: UsageMetricType) -> int:
        """Ceiling for a usage metric."""
        match metric:
            case UsageMetricType.CLIENT_COMPANIES:
                return self.max_client_companies
            case UsageMetricType.DOCUMENTS:
                return self.max_documents_per_month
            case UsageMetricType.AI_ANALYSES:
                return self.max_ai_analyses_per_month
            case UsageMetricType.USERS:
                return self.max_users
            case UsageMetricType.SCHEDULED_REPORTS:
                return self.max_scheduled_reports
        raise ValueError(f"Unknown usage metric: {metric!r}")


PLAN_CONFIGS: MappingProxyType[SubscriptionPlan, PlanConfig] = MappingProxyType(
    {
        SubscriptionPlan.FREE: PlanConfig(
            max_client_companies=3,
            max_documents_per_month=100,
            max_ai_analyses_per_month=50,
            max_users=3,
            max_scheduled_reports=1,
        ),
        SubscriptionPlan.PRO: PlanConfig(
            max_client_companies=50,
            max_documents_per_month=1000,
            max_ai_analyses_per_month=500,
            max_users=20,
            max_scheduled_reports=10,
        ),
        SubscriptionPlan.ENTERPRISE: PlanConfig(
            max_client_companies=10000,
            max_documents_per_month=100000,
            max_ai_analyses_per_month=50000,
            max_users=1000,
            max_scheduled_reports=1000,
        ),
    }
)


def get_plan_config(plan: SubscriptionPlan | str) -> PlanConfig:
    """Look up the ceilings of a plan tier.

    Raises:
        ValueError: If plan is not a known tier
    """
    return PLAN_CONFIGS[SubscriptionPlan(plan)]
