"""Billing API endpoints.

- GET /billing/subscription - Current plan, status and limits
- PUT /billing/subscription - Change plan, status or validity dates
- GET /billing/usage - Consumption of every metric this month
- GET /billing/usage/{metric}/check - Whether one more unit is allowed
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from muhasebi.api.dependencies import get_subscription_service, get_tenant_id, get_usage_limiter
from muhasebi.api.schemas.billing import (
    LimitCheckResponse,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
    UsageResponse,
)
from muhasebi.api.schemas.common import DataResponse
from muhasebi.billing import SubscriptionService, UsagePlanLimiter
from muhasebi.db.models.billing import UsageMetricType

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get(
    "/subscription",
    response_model=DataResponse[SubscriptionResponse],
    summary="Get tenant subscription",
    description="Plan, status, validity dates and plan limits. Tenants that never subscribed are on FREE.",
)
async def get_subscription(
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    subscriptions: Annotated[SubscriptionService, Depends(get_subscription_service)],
) -> DataResponse[SubscriptionResponse]:
    view = await subscriptions.get_tenant_subscription(tenant_id)
    return DataResponse(data=SubscriptionResponse.from_view(view))


@router.put(
    "/subscription",
    response_model=DataResponse[SubscriptionResponse],
    summary="Update tenant subscription",
    description="Only the fields present in the body change; null clears a date.",
)
async def update_subscription(
    body: SubscriptionUpdateRequest,
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    subscriptions: Annotated[SubscriptionService, Depends(get_subscription_service)],
) -> DataResponse[SubscriptionResponse]:
    dates = {
        name: getattr(body, name)
        for name in ("valid_until", "trial_until")
        if name in body.model_fields_set
    }
    view = await subscriptions.update_tenant_subscription(
        tenant_id,
        plan=body.plan,
        status=body.status,
        **dates,
    )
    return DataResponse(data=SubscriptionResponse.from_view(view))


@router.get(
    "/usage",
    response_model=DataResponse[UsageResponse],
    summary="Get tenant usage",
    description="Used, limit and remaining for every metered resource in the current month.",
)
async def get_usage(
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    limiter: Annotated[UsagePlanLimiter, Depends(get_usage_limiter)],
) -> DataResponse[UsageResponse]:
    summary = await limiter.get_usage_for_tenant(tenant_id)
    return DataResponse(data=UsageResponse.from_summary(summary))


@router.get(
    "/usage/{metric}/check",
    response_model=DataResponse[LimitCheckResponse],
    summary="Check a usage limit",
    description="Whether the tenant may consume one more unit of the metric.",
)
async def check_usage_limit(
    metric: UsageMetricType,
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    limiter: Annotated[UsagePlanLimiter, Depends(get_usage_limiter)],
) -> DataResponse[LimitCheckResponse]:
    result = await limiter.check_limit(tenant_id, metric)
    return DataResponse(data=LimitCheckResponse.from_result(metric, result))
