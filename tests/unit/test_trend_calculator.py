"""Unit tests for RiskTrendCalculator."""
# ruff: noqa: ARG002  # Fixtures used for database setup side effects

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils.compat import uuid7

from muhasebi.config.settings import RiskTrendConfig
from muhasebi.core.exceptions import NotFoundError
from muhasebi.db.models.risk import ClientCompanyRiskScore, RiskEntityType, RiskSeverity
from muhasebi.db.repositories import DocumentRiskScoreRepository
from muhasebi.risk import RiskScoreHistoryStore, RiskScoreObservation, RiskTrendCalculator, TrendDirection


class TestDocumentRiskTrend:
    """Tests for get_document_risk_trend."""

    @pytest_asyncio.fixture
    async def calculator(self, db_session: AsyncSession) -> RiskTrendCalculator:
        """Create calculator with default config."""
        return RiskTrendCalculator(db_session, config=RiskTrendConfig())

    @pytest_asyncio.fixture
    async def store(self, db_session: AsyncSession) -> RiskScoreHistoryStore:
        return RiskScoreHistoryStore(db_session)

    async def _seed(
        self,
        db_session: AsyncSession,
        store: RiskScoreHistoryStore,
        tenant_id: UUID,
        document_id: UUID,
        scores: list[float],
        current: float,
    ) -> None:
        now = datetime.now(UTC)
        for i, score in enumerate(scores):
            await store.append(
                RiskScoreObservation(
                    tenant_id=tenant_id,
                    entity_type=RiskEntityType.DOCUMENT,
                    entity_id=document_id,
                    score=score,
                    severity=RiskSeverity.MEDIUM,
                    recorded_at=now - timedelta(days=len(scores) - i),
                )
            )
        await DocumentRiskScoreRepository(db_session).upsert(
            tenant_id, document_id, current, RiskSeverity.HIGH
        )

    @pytest.mark.asyncio
    async def test_four_point_history(self, db_session, calculator, store, tenant_id):
        """Test a 50, 60, 70, 75 history with current score 75."""
        document_id = uuid7()
        await self._seed(db_session, store, tenant_id, document_id, [50, 60, 70, 75], 75)

        result = await calculator.get_document_risk_trend(tenant_id, document_id)

        assert result.current_score == 75
        assert result.previous_score == 70
        assert result.trend == TrendDirection.STABLE
        assert result.average_score == pytest.approx(63.75)
        assert result.min_score == 50
        assert result.max_score == 75
        assert [point.score for point in result.history] == [50, 60, 70, 75]

    @pytest.mark.asyncio
    async def test_jump_is_increasing(self, db_session, calculator, store, tenant_id):
        """Test a 50 -> 75 history is increasing."""
        document_id = uuid7()
        await self._seed(db_session, store, tenant_id, document_id, [50, 75], 75)

        result = await calculator.get_document_risk_trend(tenant_id, document_id)

        assert result.previous_score == 50
        assert result.trend == TrendDirection.INCREASING

    @pytest.mark.asyncio
    async def test_current_score_comes_from_live_record(self, db_session, calculator, store, tenant_id):
        """Test the live score record wins over the last history point."""
        document_id = uuid7()
        await self._seed(db_session, store, tenant_id, document_id, [40, 50], 80)

        result = await calculator.get_document_risk_trend(tenant_id, document_id)

        assert result.current_score == 80
        assert result.previous_score == 40
        assert result.trend == TrendDirection.INCREASING
        assert result.max_score == 50

    @pytest.mark.asyncio
    async def test_no_history_synthesizes_single_point(self, db_session, calculator, tenant_id):
        """Test an empty window falls back to the live score record."""
        document_id = uuid7()
        generated_at = datetime.now(UTC) - timedelta(days=2)
        await DocumentRiskScoreRepository(db_session).upsert(
            tenant_id, document_id, 33, RiskSeverity.LOW, generated_at=generated_at
        )

        result = await calculator.get_document_risk_trend(tenant_id, document_id)

        assert len(result.history) == 1
        point = result.history[0]
        assert point.score == 33
        assert point.severity == RiskSeverity.LOW
        assert point.date == generated_at
        assert result.previous_score is None
        assert result.trend == TrendDirection.STABLE
        assert result.average_score == result.min_score == result.max_score == 33

    @pytest.mark.asyncio
    async def test_history_outside_window_is_ignored(self, db_session, calculator, store, tenant_id):
        """Test only observations inside the lookback window count."""
        document_id = uuid7()
        await store.append(
            RiskScoreObservation(
                tenant_id=tenant_id,
                entity_type=RiskEntityType.DOCUMENT,
                entity_id=document_id,
                score=10,
                severity=RiskSeverity.LOW,
                recorded_at=datetime.now(UTC) - timedelta(days=45),
            )
        )
        await DocumentRiskScoreRepository(db_session).upsert(
            tenant_id, document_id, 20, RiskSeverity.LOW
        )

        result = await calculator.get_document_risk_trend(tenant_id, document_id, days=30)

        assert len(result.history) == 1
        assert result.history[0].score == 20

    @pytest.mark.asyncio
    async def test_unscored_document_not_found(self, calculator, tenant_id):
        """Test a document without a live score raises NotFoundError."""
        document_id = uuid7()

        with pytest.raises(NotFoundError) as exc_info:
            await calculator.get_document_risk_trend(tenant_id, document_id)

        assert exc_info.value.resource_id == document_id
        assert str(exc_info.value) == "Belge risk skoru bulunamadı."

    @pytest.mark.asyncio
    async def test_other_tenant_document_not_found(self, db_session, calculator, tenant_id):
        """Test a document scored for another tenant is invisible."""
        document_id = uuid7()
        await DocumentRiskScoreRepository(db_session).upsert(
            uuid7(), document_id, 50, RiskSeverity.MEDIUM
        )

        with pytest.raises(NotFoundError):
            await calculator.get_document_risk_trend(tenant_id, document_id)

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, db_session, calculator, store, tenant_id):
        """Test computing the same trend twice without writes gives the same result."""
        document_id = uuid7()
        await self._seed(db_session, store, tenant_id, document_id, [20, 35, 30], 30)
        now = datetime.now(UTC)

        first = await calculator.get_document_risk_trend(tenant_id, document_id, now=now)
        second = await calculator.get_document_risk_trend(tenant_id, document_id, now=now)

        assert first.to_dict() == second.to_dict()


class TestCompanyRiskTrend:
    """Tests for get_company_risk_trend."""

    @pytest_asyncio.fixture
    async def calculator(self, db_session: AsyncSession) -> RiskTrendCalculator:
        return RiskTrendCalculator(db_session, config=RiskTrendConfig())

    async def _score(
        self,
        db_session: AsyncSession,
        tenant_id: UUID,
        company_id: UUID,
        score: float,
        days_ago: int,
    ) -> None:
        db_session.add(
            ClientCompanyRiskScore(
                tenant_id=tenant_id,
                client_company_id=company_id,
                score=score,
                severity=RiskSeverity.MEDIUM.value,
                triggered_rule_codes=[],
                generated_at=datetime.now(UTC) - timedelta(days=days_ago),
            )
        )
        await db_session.commit()

    @pytest.mark.asyncio
    async def test_last_row_is_current(self, db_session, calculator, tenant_id):
        """Test current and previous come from the last two rows."""
        company_id = uuid7()
        await self._score(db_session, tenant_id, company_id, 45, days_ago=1)
        await self._score(db_session, tenant_id, company_id, 30, days_ago=5)

        result = await calculator.get_company_risk_trend(tenant_id, company_id)

        assert [point.score for point in result.history] == [30, 45]
        assert result.current_score == 45
        assert result.previous_score == 30
        assert result.trend == TrendDirection.INCREASING
        assert result.average_score == pytest.approx(37.5)

    @pytest.mark.asyncio
    async def test_single_row(self, db_session, calculator, tenant_id):
        """Test a single company score is stable with no previous score."""
        company_id = uuid7()
        await self._score(db_session, tenant_id, company_id, 61, days_ago=3)

        result = await calculator.get_company_risk_trend(tenant_id, company_id)

        assert result.previous_score is None
        assert result.trend == TrendDirection.STABLE

    @pytest.mark.asyncio
    async def test_no_rows_not_found(self, calculator, tenant_id):
        """Test a company without scores raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            await calculator.get_company_risk_trend(tenant_id, uuid7())

        assert str(exc_info.value) == "Müşteri risk skoru bulunamadı."

    @pytest.mark.asyncio
    async def test_rows_outside_window_not_found(self, db_session, calculator, tenant_id):
        """Test there is no synthetic fallback for companies."""
        company_id = uuid7()
        await self._score(db_session, tenant_id, company_id, 50, days_ago=120)

        with pytest.raises(NotFoundError):
            await calculator.get_company_risk_trend(tenant_id, company_id, days=90)
