"""Risk score history store.

Append-only, tenant-scoped ledger of risk score observations. Writes are
best-effort: each append runs in a savepoint of the caller's transaction, so a
failed insert is rolled back on its own and logged, never raised, and history
bookkeeping can not break the risk computation that produced the score.
Committing stays with the caller.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.db.models.risk import RiskEntityType, RiskScoreHistory, RiskSeverity
from muhasebi.db.repositories.risk_history import RiskScoreHistoryRepository
from muhasebi.risk.types import RiskScoreObservation

logger = structlog.get_logger()


def _plain(value: Any) -> str:
    return str(getattr(value, "value", value))


def _log_append_failure(
    exc: Exception,
    tenant_id: Any,
    entity_type: Any,
    entity_id: Any,
    score: Any,
    severity: Any,
) -> None:
    logger.error(
        "risk_score_history_append_failed",
        tenant_id=str(tenant_id),
        entity_type=_plain(entity_type),
        entity_id=str(entity_id),
        score=score,
        severity=_plain(severity),
        error_type=type(exc).__name__,
        error_message=str(exc),
    )


class RiskScoreHistoryStore:
    """Durable ledger of risk score observations per document or company.

    Example:
        store = RiskScoreHistoryStore(session)
        await store.record(tenant_id, RiskEntityType.DOCUMENT, document_id, 72.5, RiskSeverity.HIGH)
        await session.commit()
        rows = await store.list_by_entity(tenant_id, RiskEntityType.DOCUMENT, document_id, cutoff)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._repository = RiskScoreHistoryRepository(db)

    async def append(self, observation: RiskScoreObservation) -> RiskScoreHistory | None:
        """Insert one observation inside a savepoint.

        Args:
            observation: The observation to persist

        Returns:
            The flushed row, or None when the write failed. Failures roll back
            the savepoint only, are logged with the full observation and never
            propagate.
        """
        try:
            async with self.db.begin_nested():
                row = await self._repository.create(observation.to_row(), commit=False)
        except Exception as exc:
            _log_append_failure(
                exc,
                observation.tenant_id,
                observation.entity_type,
                observation.entity_id,
                observation.score,
                observation.severity,
            )
            return None

        logger.debug(
            "risk_score_history_appended",
            tenant_id=str(observation.tenant_id),
            entity_type=observation.entity_type.value,
            entity_id=str(observation.entity_id),
            score=observation.score,
        )
        return row

    async def record(
        self,
        tenant_id: UUID,
        entity_type: RiskEntityType | str,
        entity_id: UUID,
        score: float,
        severity: RiskSeverity | str,
    ) -> RiskScoreHistory | None:
        """Append an observation stamped with the current time.

        Invalid input (a score outside 0..100, an unknown severity) is logged
        and reported as None like any other failed append.
        """
        try:
            observation = RiskScoreObservation(
                tenant_id=tenant_id,
                entity_type=entity_type,
                entity_id=entity_id,
                score=score,
                severity=severity,
            )
        except (TypeError, ValueError) as exc:
            _log_append_failure(exc, tenant_id, entity_type, entity_id, score, severity)
            return None
        return await self.append(observation)

    async def list_by_entity(
        self,
        tenant_id: UUID,
        entity_type: RiskEntityType,
        entity_id: UUID,
        since: datetime,
    ) -> list[RiskScoreObservation]:
        """Observations for one entity at or after `since`, oldest first."""
        rows = await self._repository.list_by_entity(tenant_id, entity_type, entity_id, since)
        return [RiskScoreObservation.from_row(row) for row in rows]

    async def list_by_tenant_scope(
        self,
        tenant_id: UUID,
        entity_type: RiskEntityType,
        since: datetime,
    ) -> list[RiskScoreObservation]:
        """Observations for every entity of a type at or after `since`, oldest first."""
        rows = await self._repository.list_by_tenant_scope(tenant_id, entity_type, since)
        return [RiskScoreObservation.from_row(row) for row in rows]
