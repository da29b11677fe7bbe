"""Risk trend API endpoints.

- GET /risk/documents/{document_id}/trend - Score history of a document
- GET /risk/companies/{client_company_id}/trend - Score history of a client company
- GET /risk/dashboard/trends - Tenant-wide daily risk series
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from muhasebi.api.dependencies import get_tenant_id, get_trend_calculator, get_trends_aggregator
from muhasebi.api.schemas.common import DataResponse
from muhasebi.api.schemas.errors import APIError
from muhasebi.api.schemas.risk import RiskTrendResponse, TenantTrendsResponse
from muhasebi.risk import RiskTrendCalculator, RiskTrendsAggregator, TrendPeriod

router = APIRouter(prefix="/risk", tags=["risk"])

LookbackDays = Annotated[
    int | None,
    Query(ge=1, le=3650, description="Lookback window in days (default 90)"),
]


@router.get(
    "/documents/{document_id}/trend",
    response_model=DataResponse[RiskTrendResponse],
    summary="Get document risk trend",
    description="Score history, trend direction and statistics of a document.",
    responses={404: {"model": APIError, "description": "Document has never been scored"}},
)
async def get_document_risk_trend(
    document_id: UUID,
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    calculator: Annotated[RiskTrendCalculator, Depends(get_trend_calculator)],
    days: LookbackDays = None,
) -> DataResponse[RiskTrendResponse]:
    result = await calculator.get_document_risk_trend(tenant_id, document_id, days)
    return DataResponse(data=RiskTrendResponse.from_result(result))


@router.get(
    "/companies/{client_company_id}/trend",
    response_model=DataResponse[RiskTrendResponse],
    summary="Get client company risk trend",
    description="Score history, trend direction and statistics of a client company.",
    responses={404: {"model": APIError, "description": "No company score in the window"}},
)
async def get_company_risk_trend(
    client_company_id: UUID,
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    calculator: Annotated[RiskTrendCalculator, Depends(get_trend_calculator)],
    days: LookbackDays = None,
) -> DataResponse[RiskTrendResponse]:
    result = await calculator.get_company_risk_trend(tenant_id, client_company_id, days)
    return DataResponse(data=RiskTrendResponse.from_result(result))


@router.get(
    "/dashboard/trends",
    response_model=DataResponse[TenantTrendsResponse],
    summary="Get tenant risk trends",
    description="""
    Daily series for the risk dashboard over the chosen period:
    - average company risk score per day
    - risk alert count per day
    - observations per severity per day

    Every series holds one entry per calendar day, zero-filled.
    """,
)
async def get_dashboard_trends(
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
    aggregator: Annotated[RiskTrendsAggregator, Depends(get_trends_aggregator)],
    period: Annotated[TrendPeriod, Query(description="7d, 30d, 90d or 1y")] = TrendPeriod.MONTH,
) -> DataResponse[TenantTrendsResponse]:
    result = await aggregator.get_dashboard_trends(tenant_id, period)
    return DataResponse(data=TenantTrendsResponse.from_result(result))
