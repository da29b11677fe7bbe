"""Tenant-wide risk trends for the dashboard.

Buckets company score observations and risk alerts by UTC calendar day
over a period and walks every day of the period so the chart arrays are
gap-free and date-aligned.

Two averages are reported on purpose:
- risk_score_trend.scores holds one value per day with 0 for days
  without observations (chart series).
- risk_score_trend.average_score and the trend direction only consider
  days that had observations.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.config.settings import RiskTrendConfig, get_settings
from muhasebi.core.logging import LogContext
from muhasebi.db.models.risk import RiskAlert, RiskEntityType, RiskSeverity
from muhasebi.db.repositories.risk_alert import RiskAlertRepository
from muhasebi.risk.history import RiskScoreHistoryStore
from muhasebi.risk.trend_calculator import classify_trend
from muhasebi.risk.types import (
    AlertFrequencyTrend,
    RiskDistributionTrend,
    RiskScoreObservation,
    RiskScoreTrend,
    TenantTrendsResult,
    TrendDirection,
    TrendPeriod,
)

logger = structlog.get_logger()


@dataclass
class _DailyScore:
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


def _utc_day(moment: datetime) -> date:
    """Calendar day of a timestamp in UTC (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(UTC).date()


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def split_half_trend(
    scores: list[float],
    dead_band: float,
) -> TrendDirection:
    """Compare the mean of the first half of `scores` with the second half.

    With an odd count the middle element goes to the second half.
    Fewer than two scores is always stable.
    """
    if len(scores) < 2:
        return TrendDirection.STABLE

    middle = len(scores) // 2
    first_avg = _mean(scores[:middle])
    second_avg = _mean(scores[middle:])
    return classify_trend(second_avg, first_avg, dead_band)


class RiskTrendsAggregator:
    """Aggregates company risk history and alerts into dashboard series.

    Example:
        aggregator = RiskTrendsAggregator(session)
        trends = await aggregator.get_dashboard_trends(tenant_id, TrendPeriod.MONTH)
        chart(trends.risk_score_trend.dates, trends.risk_score_trend.scores)
    """

    def __init__(
        self,
        db: AsyncSession,
        config: RiskTrendConfig | None = None,
        history_store: RiskScoreHistoryStore | None = None,
    ):
        self.config = config or get_settings().risk_trends
        self.history_store = history_store or RiskScoreHistoryStore(db)
        self._alerts = RiskAlertRepository(db)

    async def get_dashboard_trends(
        self,
        tenant_id: UUID,
        period: TrendPeriod | str = TrendPeriod.MONTH,
        *,
        now: datetime | None = None,
    ) -> TenantTrendsResult:
        """Get tenant-wide risk trends over a named period.

        Args:
            tenant_id: Tenant to aggregate
            period: 7d, 30d, 90d or 1y
            now: Reference time (default: current UTC time)

        Returns:
            Series with period.days + 1 entries, first day to today inclusive

        Raises:
            ValueError: If period is not a known period name
        """
        period = TrendPeriod(period)
        now = now or datetime.now(UTC)
        cutoff = now - timedelta(days=period.days)

        with LogContext(operation="dashboard_trends", tenant_id=str(tenant_id), period=period.value):
            observations = await self.history_store.list_by_tenant_scope(
                tenant_id, RiskEntityType.COMPANY, cutoff
            )
            alerts = await self._alerts.list_created_since(tenant_id, cutoff)

            result = self.aggregate(
                observations,
                alerts,
                start=_utc_day(cutoff),
                end=_utc_day(now),
            )
            logger.debug(
                "dashboard_trends_computed",
                observations=len(observations),
                alerts=len(alerts),
                days=len(result.risk_score_trend.dates),
                trend=result.risk_score_trend.trend.value,
            )
        return result

    def aggregate(
        self,
        observations: Iterable[RiskScoreObservation],
        alerts: Iterable[RiskAlert],
        *,
        start: date,
        end: date,
    ) -> TenantTrendsResult:
        """Bucket observations and alerts per day between start and end inclusive."""
        daily_scores: dict[date, _DailyScore] = defaultdict(_DailyScore)
        daily_severity: dict[date, Counter[RiskSeverity]] = defaultdict(Counter)
        for obs in observations:
            day = _utc_day(obs.recorded_at)
            bucket = daily_scores[day]
            bucket.total += obs.score
            bucket.count += 1
            daily_severity[day][obs.severity] += 1

        alert_list = list(alerts)
        daily_alerts: Counter[date] = Counter(_utc_day(alert.created_at) for alert in alert_list)

        score_trend = RiskScoreTrend()
        alert_trend = AlertFrequencyTrend(total_alerts=len(alert_list))
        distribution = RiskDistributionTrend()

        day = start
        while day <= end:
            score_trend.dates.append(day)
            alert_trend.dates.append(day)
            distribution.dates.append(day)

            bucket = daily_scores.get(day)
            score_trend.scores.append(bucket.average if bucket else 0.0)

            alert_trend.counts.append(daily_alerts.get(day, 0))

            severities = daily_severity.get(day, Counter())
            distribution.low.append(severities[RiskSeverity.LOW])
            distribution.medium.append(severities[RiskSeverity.MEDIUM])
            distribution.high.append(severities[RiskSeverity.HIGH])

            day += timedelta(days=1)

        scored_days = [score for score in score_trend.scores if score > 0]
        score_trend.average_score = _mean(scored_days)
        score_trend.trend = split_half_trend(scored_days, self.config.trend_dead_band)

        return TenantTrendsResult(
            risk_score_trend=score_trend,
            alert_frequency_trend=alert_trend,
            risk_distribution_trend=distribution,
        )
