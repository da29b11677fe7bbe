"""Per-entity risk trend calculation.

Derives the current and previous score, trend direction and summary
statistics of one document or client company over a lookback window.

Documents and companies deliberately take different paths:
- Documents have a live score pointer (document_risk_scores) next to the
  history ledger. The pointer is authoritative for the current score and
  stands in as a single history point when the window holds no history.
- Companies are scored afresh on every run, so their score rows are the
  history. An empty window is reported as not found.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.config.settings import RiskTrendConfig, get_settings
from muhasebi.core.exceptions import NotFoundError
from muhasebi.db.models.risk import RiskEntityType, RiskSeverity
from muhasebi.db.repositories.risk_score import (
    ClientCompanyRiskScoreRepository,
    DocumentRiskScoreRepository,
)
from muhasebi.risk.history import RiskScoreHistoryStore
from muhasebi.risk.types import RiskHistoryPoint, RiskTrendResult, TrendDirection

logger = structlog.get_logger()

DEFAULT_TREND_DEAD_BAND = 5.0


def classify_trend(
    current: float,
    previous: float | None,
    dead_band: float = DEFAULT_TREND_DEAD_BAND,
) -> TrendDirection:
    """Classify the move from `previous` to `current`.

    A move must exceed the dead-band in either direction to count; a delta
    of exactly `dead_band` is stable.
    """
    if previous is None:
        return TrendDirection.STABLE

    diff = current - previous
    if diff > dead_band:
        return TrendDirection.INCREASING
    if diff < -dead_band:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def summarize_history(
    history: Sequence[RiskHistoryPoint],
    current_score: float,
    dead_band: float = DEFAULT_TREND_DEAD_BAND,
) -> RiskTrendResult:
    """Build a trend result from a non-empty, oldest-first history.

    Raises:
        ValueError: If history is empty
    """
    if not history:
        raise ValueError("Cannot summarize an empty risk score history")

    previous_score = history[-2].score if len(history) > 1 else None
    scores = [point.score for point in history]

    return RiskTrendResult(
        history=list(history),
        current_score=current_score,
        previous_score=previous_score,
        trend=classify_trend(current_score, previous_score, dead_band),
        average_score=sum(scores) / len(scores),
        min_score=min(scores),
        max_score=max(scores),
    )


class RiskTrendCalculator:
    """Computes RiskTrendResult for a single document or client company.

    Example:
        calculator = RiskTrendCalculator(session)
        trend = await calculator.get_document_risk_trend(tenant_id, document_id, days=30)
        print(trend.trend, trend.average_score)
    """

    def __init__(
        self,
        db: AsyncSession,
        config: RiskTrendConfig | None = None,
        history_store: RiskScoreHistoryStore | None = None,
    ):
        self.config = config or get_settings().risk_trends
        self.history_store = history_store or RiskScoreHistoryStore(db)
        self._document_scores = DocumentRiskScoreRepository(db)
        self._company_scores = ClientCompanyRiskScoreRepository(db)

    async def get_document_risk_trend(
        self,
        tenant_id: UUID,
        document_id: UUID,
        days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> RiskTrendResult:
        """Get the risk score trend of a document.

        Args:
            tenant_id: Owning tenant
            document_id: Document to analyze
            days: Lookback window (default from config)
            now: Reference time (default: current UTC time)

        Returns:
            Trend over the window, never with an empty history

        Raises:
            NotFoundError: If the document has never been scored
        """
        days = days if days is not None else self.config.document_trend_days
        cutoff = (now or datetime.now(UTC)) - timedelta(days=days)

        current = await self._document_scores.get_by_document(tenant_id, document_id)
        if current is None:
            raise NotFoundError(
                "Belge risk skoru bulunamadı.",
                resource="document_risk_score",
                resource_id=document_id,
            )

        observations = await self.history_store.list_by_entity(
            tenant_id, RiskEntityType.DOCUMENT, document_id, cutoff
        )
        if observations:
            history = [
                RiskHistoryPoint(date=obs.recorded_at, score=obs.score, severity=obs.severity)
                for obs in observations
            ]
        else:
            history = [
                RiskHistoryPoint(
                    date=current.generated_at,
                    score=float(current.score),
                    severity=RiskSeverity(current.severity),
                )
            ]

        result = summarize_history(history, float(current.score), self.config.trend_dead_band)
        logger.debug(
            "document_risk_trend_computed",
            tenant_id=str(tenant_id),
            document_id=str(document_id),
            days=days,
            points=len(history),
            synthetic=not observations,
            trend=result.trend.value,
        )
        return result

    async def get_company_risk_trend(
        self,
        tenant_id: UUID,
        client_company_id: UUID,
        days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> RiskTrendResult:
        """Get the risk score trend of a client company.

        Args:
            tenant_id: Owning tenant
            client_company_id: Company to analyze
            days: Lookback window (default from config)
            now: Reference time (default: current UTC time)

        Raises:
            NotFoundError: If the company has no score inside the window
        """
        days = days if days is not None else self.config.company_trend_days
        cutoff = (now or datetime.now(UTC)) - timedelta(days=days)

        rows = await self._company_scores.list_since(tenant_id, client_company_id, cutoff)
        if not rows:
            raise NotFoundError(
                "Müşteri risk skoru bulunamadı.",
                resource="client_company_risk_score",
                resource_id=client_company_id,
            )

        history = [
            RiskHistoryPoint(
                date=row.generated_at,
                score=float(row.score),
                severity=RiskSeverity(row.severity),
            )
            for row in rows
        ]

        result = summarize_history(history, history[-1].score, self.config.trend_dead_band)
        logger.debug(
            "company_risk_trend_computed",
            tenant_id=str(tenant_id),
            client_company_id=str(client_company_id),
            days=days,
            points=len(history),
            trend=result.trend.value,
        )
        return result
