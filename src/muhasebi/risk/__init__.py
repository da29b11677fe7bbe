"""Risk score history and trend analysis."""

from muhasebi.risk.history import RiskScoreHistoryStore
from muhasebi.risk.trend_calculator import RiskTrendCalculator, classify_trend, summarize_history
from muhasebi.risk.trends_aggregator import RiskTrendsAggregator, split_half_trend
from muhasebi.risk.types import (
    AlertFrequencyTrend,
    RiskDistributionTrend,
    RiskHistoryPoint,
    RiskScoreObservation,
    RiskScoreTrend,
    RiskTrendResult,
    TenantTrendsResult,
    TrendDirection,
    TrendPeriod,
)

__all__ = [
    # Components
    "RiskScoreHistoryStore",
    "RiskTrendCalculator",
    "RiskTrendsAggregator",
    # Functions
    "classify_trend",
    "split_half_trend",
    "summarize_history",
    # Types
    "AlertFrequencyTrend",
    "RiskDistributionTrend",
    "RiskHistoryPoint",
    "RiskScoreObservation",
    "RiskScoreTrend",
    "RiskTrendResult",
    "TenantTrendsResult",
    "TrendDirection",
    "TrendPeriod",
]
