"""Type definitions for risk score history and trends."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from muhasebi.db.models.risk import RiskEntityType, RiskScoreHistory, RiskSeverity


class TrendDirection(str, Enum):
    """Direction of risk score movement."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TrendPeriod(str, Enum):
    """Named lookback periods for the tenant trend dashboard."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"

    @property
    def days(self) -> int:
        """Number of days covered by the period."""
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    TrendPeriod.WEEK: 7,
    TrendPeriod.MONTH: 30,
    TrendPeriod.QUARTER: 90,
    TrendPeriod.YEAR: 365,
}


@dataclass(frozen=True)
class RiskScoreObservation:
    """A single risk score computed for a document or client company."""

    tenant_id: UUID
    entity_type: RiskEntityType
    entity_id: UUID
    score: float
    severity: RiskSeverity
    recorded_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(self, "entity_type", RiskEntityType(self.entity_type))
        object.__setattr__(self, "severity", RiskSeverity(self.severity))
        if not 0 <= self.score <= 100:
            raise ValueError(f"Risk score must be within 0..100, got {self.score}")

    @classmethod
    def from_row(cls, row: RiskScoreHistory) -> "RiskScoreObservation":
        """Build an observation from a stored history row."""
        return cls(
            tenant_id=row.tenant_id,
            entity_type=RiskEntityType(row.entity_type),
            entity_id=row.entity_id,
            score=float(row.score),
            severity=RiskSeverity(row.severity),
            recorded_at=row.recorded_at,
        )

    def to_row(self) -> RiskScoreHistory:
        """Build the ORM row to persist this observation."""
        return RiskScoreHistory(
            tenant_id=self.tenant_id,
            entity_type=self.entity_type.value,
            entity_id=self.entity_id,
            score=self.score,
            severity=self.severity.value,
            recorded_at=self.recorded_at,
        )


@dataclass(frozen=True)
class RiskHistoryPoint:
    """One point of an entity's score history."""

    date: datetime
    score: float
    severity: RiskSeverity

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "score": self.score,
            "severity": self.severity.value,
        }


@dataclass
class RiskTrendResult:
    """Score history and trend of a single entity.

    history is never empty and previous_score is None exactly when
    history holds a single point.
    """

    history: list[RiskHistoryPoint]
    current_score: float
    previous_score: float | None
    trend: TrendDirection
    average_score: float
    min_score: float
    max_score: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "history": [point.to_dict() for point in self.history],
            "current_score": self.current_score,
            "previous_score": self.previous_score,
            "trend": self.trend.value,
            "average_score": self.average_score,
            "min_score": self.min_score,
            "max_score": self.max_score,
        }


@dataclass
class RiskScoreTrend:
    """Daily average company scores for charting."""

    dates: list[date] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    average_score: float = 0.0
    trend: TrendDirection = TrendDirection.STABLE


@dataclass
class AlertFrequencyTrend:
    """Daily risk alert counts."""

    dates: list[date] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)
    total_alerts: int = 0


@dataclass
class RiskDistributionTrend:
    """Daily count of observations per severity."""

    dates: list[date] = field(default_factory=list)
    low: list[int] = field(default_factory=list)
    medium: list[int] = field(default_factory=list)
    high: list[int] = field(default_factory=list)


@dataclass
class TenantTrendsResult:
    """Tenant-wide risk dashboard over a period, one entry per calendar day."""

    risk_score_trend: RiskScoreTrend
    alert_frequency_trend: AlertFrequencyTrend
    risk_distribution_trend: RiskDistributionTrend

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        dates = [d.isoformat() for d in self.risk_score_trend.dates]
        return {
            "risk_score_trend": {
                "dates": dates,
                "scores": self.risk_score_trend.scores,
                "average_score": self.risk_score_trend.average_score,
                "trend": self.risk_score_trend.trend.value,
            },
            "alert_frequency_trend": {
                "dates": dates,
                "counts": self.alert_frequency_trend.counts,
                "total_alerts": self.alert_frequency_trend.total_alerts,
            },
            "risk_distribution_trend": {
                "dates": dates,
                "low": self.risk_distribution_trend.low,
                "medium": self.risk_distribution_trend.medium,
                "high": self.risk_distribution_trend.high,
            },
        }
