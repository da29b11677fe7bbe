"""API request and response schemas."""

from .billing import (
    LimitCheckResponse,
    MetricUsageResponse,
    PlanLimitsResponse,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
    UsageResponse,
)
from .common import CamelModel, DataResponse
from .errors import APIError, ErrorCode
from .health import HealthResponse, HealthStatus
from .risk import (
    AlertFrequencyTrendResponse,
    RiskDistributionTrendResponse,
    RiskHistoryPointResponse,
    RiskScoreTrendResponse,
    RiskTrendResponse,
    TenantTrendsResponse,
)

__all__ = [
    "APIError",
    "AlertFrequencyTrendResponse",
    "CamelModel",
    "DataResponse",
    "ErrorCode",
    "HealthResponse",
    "HealthStatus",
    "LimitCheckResponse",
    "MetricUsageResponse",
    "PlanLimitsResponse",
    "RiskDistributionTrendResponse",
    "RiskHistoryPointResponse",
    "RiskScoreTrendResponse",
    "RiskTrendResponse",
    "SubscriptionResponse",
    "SubscriptionUpdateRequest",
    "TenantTrendsResponse",
    "UsageResponse",
]
