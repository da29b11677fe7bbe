"""API schemas for risk trend endpoints."""

from datetime import date, datetime

from pydantic import Field

from muhasebi.api.schemas.common import CamelModel
from muhasebi.db.models.risk import RiskSeverity
from muhasebi.risk.types import RiskTrendResult, TenantTrendsResult, TrendDirection


class RiskHistoryPointResponse(CamelModel):
    """One point of an entity's score history."""

    date: datetime
    score: float = Field(..., ge=0, le=100)
    severity: RiskSeverity


class RiskTrendResponse(CamelModel):
    """Score history and trend of a document or client company."""

    history: list[RiskHistoryPointResponse]
    current_score: float
    previous_score: float | None
    trend: TrendDirection
    average_score: float
    min_score: float
    max_score: float

    @classmethod
    def from_result(cls, result: RiskTrendResult) -> "RiskTrendResponse":
        return cls(
            history=[
                RiskHistoryPointResponse(date=p.date, score=p.score, severity=p.severity)
                for p in result.history
            ],
            current_score=result.current_score,
            previous_score=result.previous_score,
            trend=result.trend,
            average_score=result.average_score,
            min_score=result.min_score,
            max_score=result.max_score,
        )


class RiskScoreTrendResponse(CamelModel):
    dates: list[date]
    scores: list[float]
    average_score: float
    trend: TrendDirection


class AlertFrequencyTrendResponse(CamelModel):
    dates: list[date]
    counts: list[int]
    total_alerts: int


class RiskDistributionTrendResponse(CamelModel):
    dates: list[date]
    low: list[int]
    medium: list[int]
    high: list[int]


class TenantTrendsResponse(CamelModel):
    """Tenant-wide risk dashboard series, one entry per calendar day."""

    risk_score_trend: RiskScoreTrendResponse
    alert_frequency_trend: AlertFrequencyTrendResponse
    risk_distribution_trend: RiskDistributionTrendResponse

    @classmethod
    def from_result(cls, result: TenantTrendsResult) -> "TenantTrendsResponse":
        scores = result.risk_score_trend
        alerts = result.alert_frequency_trend
        distribution = result.risk_distribution_trend
        return cls(
            risk_score_trend=RiskScoreTrendResponse(
                dates=scores.dates,
                scores=scores.scores,
                average_score=scores.average_score,
                trend=scores.trend,
            ),
            alert_frequency_trend=AlertFrequencyTrendResponse(
                dates=alerts.dates,
                counts=alerts.counts,
                total_alerts=alerts.total_alerts,
            ),
            risk_distribution_trend=RiskDistributionTrendResponse(
                dates=distribution.dates,
                low=distribution.low,
                medium=distribution.medium,
                high=distribution.high,
            ),
        )
