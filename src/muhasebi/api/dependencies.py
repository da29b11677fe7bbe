"""FastAPI dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.billing import SubscriptionService, UsagePlanLimiter
from muhasebi.db.dependencies import get_db, get_tenant_id
from muhasebi.risk import RiskTrendCalculator, RiskTrendsAggregator

# Re-export database dependencies for convenience
__all__ = [
    "get_db",
    "get_subscription_service",
    "get_tenant_id",
    "get_trend_calculator",
    "get_trends_aggregator",
    "get_usage_limiter",
]


def get_trend_calculator(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RiskTrendCalculator:
    return RiskTrendCalculator(db)


def get_trends_aggregator(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RiskTrendsAggregator:
    return RiskTrendsAggregator(db)


def get_subscription_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SubscriptionService:
    return SubscriptionService(db)


def get_usage_limiter(
    db: Annotated[AsyncSession, Depends(get_db)],
    subscriptions: Annotated[SubscriptionService, Depends(get_subscription_service)],
) -> UsagePlanLimiter:
    """Usage limiter sharing the request's session with its subscription lookup."""
    return UsagePlanLimiter(db, subscriptions=subscriptions)
