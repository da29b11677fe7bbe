"""Unit tests for RiskScoreHistoryStore."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.testing import capture_logs
from uuid_utils.compat import uuid7

from muhasebi.db.models.risk import DocumentRiskScore, RiskEntityType, RiskScoreHistory, RiskSeverity
from muhasebi.db.repositories import DocumentRiskScoreRepository
from muhasebi.risk import RiskScoreHistoryStore, RiskScoreObservation


class TestRiskScoreObservation:
    """Tests for RiskScoreObservation."""

    def test_score_out_of_range_rejected(self):
        """Test scores outside 0..100 are rejected."""
        with pytest.raises(ValueError):
            RiskScoreObservation(
                tenant_id=uuid7(),
                entity_type=RiskEntityType.DOCUMENT,
                entity_id=uuid7(),
                score=100.5,
                severity=RiskSeverity.HIGH,
            )

    def test_boundaries_accepted(self):
        """Test 0 and 100 are valid scores."""
        for score in (0, 100):
            obs = RiskScoreObservation(
                tenant_id=uuid7(),
                entity_type=RiskEntityType.COMPANY,
                entity_id=uuid7(),
                score=score,
                severity=RiskSeverity.LOW,
            )
            assert obs.score == score


class TestRiskScoreHistoryStore:
    """Tests for RiskScoreHistoryStore against the database."""

    @pytest_asyncio.fixture
    async def store(self, db_session: AsyncSession) -> RiskScoreHistoryStore:
        """Create history store."""
        return RiskScoreHistoryStore(db_session)

    @pytest.mark.asyncio
    async def test_record_and_list(self, store, tenant_id):
        """Test a recorded observation is listed back."""
        document_id = uuid7()
        since = datetime.now(UTC) - timedelta(minutes=1)

        row = await store.record(
            tenant_id, RiskEntityType.DOCUMENT, document_id, 72.5, RiskSeverity.HIGH
        )

        assert row is not None
        observations = await store.list_by_entity(
            tenant_id, RiskEntityType.DOCUMENT, document_id, since
        )
        assert len(observations) == 1
        assert observations[0].score == 72.5
        assert observations[0].severity == RiskSeverity.HIGH
        assert observations[0].recorded_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_list_is_ascending_and_windowed(self, store, tenant_id):
        """Test rows come back oldest first and rows before `since` are skipped."""
        document_id = uuid7()
        now = datetime.now(UTC)
        for days_ago, score in [(1, 30), (100, 10), (20, 20)]:
            await store.append(
                RiskScoreObservation(
                    tenant_id=tenant_id,
                    entity_type=RiskEntityType.DOCUMENT,
                    entity_id=document_id,
                    score=score,
                    severity=RiskSeverity.LOW,
                    recorded_at=now - timedelta(days=days_ago),
                )
            )

        observations = await store.list_by_entity(
            tenant_id, RiskEntityType.DOCUMENT, document_id, now - timedelta(days=90)
        )

        assert [obs.score for obs in observations] == [20, 30]

    @pytest.mark.asyncio
    async def test_list_is_tenant_scoped(self, store, tenant_id):
        """Test another tenant's rows are never returned."""
        company_id = uuid7()
        since = datetime.now(UTC) - timedelta(minutes=1)
        await store.record(uuid7(), RiskEntityType.COMPANY, company_id, 90, RiskSeverity.HIGH)

        assert await store.list_by_entity(tenant_id, RiskEntityType.COMPANY, company_id, since) == []
        assert await store.list_by_tenant_scope(tenant_id, RiskEntityType.COMPANY, since) == []

    @pytest.mark.asyncio
    async def test_list_by_tenant_scope_filters_entity_type(self, store, tenant_id):
        """Test tenant scope covers every entity of one type only."""
        since = datetime.now(UTC) - timedelta(minutes=1)
        await store.record(tenant_id, RiskEntityType.COMPANY, uuid7(), 40, RiskSeverity.MEDIUM)
        await store.record(tenant_id, RiskEntityType.COMPANY, uuid7(), 60, RiskSeverity.MEDIUM)
        await store.record(tenant_id, RiskEntityType.DOCUMENT, uuid7(), 99, RiskSeverity.HIGH)

        observations = await store.list_by_tenant_scope(tenant_id, RiskEntityType.COMPANY, since)

        assert sorted(obs.score for obs in observations) == [40, 60]
        assert all(obs.entity_type == RiskEntityType.COMPANY for obs in observations)


class TestRiskScoreHistoryStoreFailures:
    """Tests for append failure handling."""

    @pytest_asyncio.fixture
    async def store(self, db_session: AsyncSession) -> RiskScoreHistoryStore:
        return RiskScoreHistoryStore(db_session)

    def _broken_observation(self, tenant_id) -> RiskScoreObservation:
        """Observation the database rejects (entity_id is NOT NULL)."""
        return RiskScoreObservation(
            tenant_id=tenant_id,
            entity_type=RiskEntityType.DOCUMENT,
            entity_id=None,
            score=55,
            severity=RiskSeverity.MEDIUM,
        )

    def _stage_document_score(self, db_session: AsyncSession, tenant_id) -> DocumentRiskScore:
        score = DocumentRiskScore(
            tenant_id=tenant_id,
            document_id=uuid7(),
            score=55,
            severity=RiskSeverity.MEDIUM.value,
        )
        db_session.add(score)
        return score

    async def _history_count(self, db_session: AsyncSession, tenant_id) -> int:
        result = await db_session.execute(
            select(func.count()).select_from(RiskScoreHistory).where(RiskScoreHistory.tenant_id == tenant_id)
        )
        return result.scalar_one()

    @pytest.mark.asyncio
    async def test_append_failure_is_swallowed(self, store, tenant_id):
        """Test a failed write returns None instead of raising."""
        assert await store.append(self._broken_observation(tenant_id)) is None

    @pytest.mark.asyncio
    async def test_failed_append_keeps_caller_work(self, db_session, store, tenant_id):
        """Test a failed write leaves the caller's pending rows intact."""
        staged = self._stage_document_score(db_session, tenant_id)

        assert await store.append(self._broken_observation(tenant_id)) is None
        await db_session.commit()

        stored = await DocumentRiskScoreRepository(db_session).get_by_document(
            tenant_id, staged.document_id
        )
        assert stored is not None
        assert await self._history_count(db_session, tenant_id) == 0

    @pytest.mark.asyncio
    async def test_append_does_not_commit_caller_work(self, db_session, store, tenant_id):
        """Test a successful write stays inside the caller's transaction."""
        staged = self._stage_document_score(db_session, tenant_id)

        row = await store.record(tenant_id, RiskEntityType.DOCUMENT, staged.document_id, 55, RiskSeverity.MEDIUM)
        assert row is not None
        await db_session.rollback()

        stored = await DocumentRiskScoreRepository(db_session).get_by_document(
            tenant_id, staged.document_id
        )
        assert stored is None
        assert await self._history_count(db_session, tenant_id) == 0

    @pytest.mark.asyncio
    async def test_append_failure_is_logged(self, store, tenant_id):
        """Test the failure log carries the full observation."""
        observation = self._broken_observation(tenant_id)

        with capture_logs() as logs:
            await store.append(observation)

        failures = [log for log in logs if log["event"] == "risk_score_history_append_failed"]
        assert len(failures) == 1
        entry = failures[0]
        assert entry["log_level"] == "error"
        assert entry["tenant_id"] == str(tenant_id)
        assert entry["entity_type"] == "document"
        assert entry["entity_id"] == "None"
        assert entry["score"] == 55
        assert entry["severity"] == "medium"
        assert entry["error_type"] == "IntegrityError"

    @pytest.mark.asyncio
    async def test_record_out_of_range_score_is_swallowed(self, db_session, store, tenant_id):
        """Test an invalid score is logged and reported as None."""
        with capture_logs() as logs:
            row = await store.record(tenant_id, RiskEntityType.DOCUMENT, uuid7(), 101, RiskSeverity.HIGH)

        assert row is None
        failures = [log for log in logs if log["event"] == "risk_score_history_append_failed"]
        assert len(failures) == 1
        assert failures[0]["score"] == 101
        assert failures[0]["severity"] == "high"
        assert failures[0]["error_type"] == "ValueError"
        assert await self._history_count(db_session, tenant_id) == 0

    @pytest.mark.asyncio
    async def test_record_accepts_plain_strings(self, store, tenant_id):
        """Test entity type and severity may be passed as their string values."""
        document_id = uuid7()
        since = datetime.now(UTC) - timedelta(minutes=1)

        row = await store.record(tenant_id, "document", document_id, 50, "high")

        assert row is not None
        assert row.severity == "high"
        observations = await store.list_by_entity(tenant_id, RiskEntityType.DOCUMENT, document_id, since)
        assert observations[0].severity == RiskSeverity.HIGH

    @pytest.mark.asyncio
    async def test_record_unknown_severity_is_swallowed(self, store, tenant_id):
        """Test an unknown severity is logged and reported as None."""
        with capture_logs() as logs:
            row = await store.record(tenant_id, RiskEntityType.COMPANY, uuid7(), 50, "extreme")

        assert row is None
        failures = [log for log in logs if log["event"] == "risk_score_history_append_failed"]
        assert failures[0]["severity"] == "extreme"
        assert failures[0]["entity_type"] == "company"
