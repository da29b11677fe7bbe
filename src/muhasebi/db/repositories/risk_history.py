"""Risk score history repository."""

import time
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy import select

from muhasebi.core.logging import log_database_query
from muhasebi.db.models.risk import RiskEntityType, RiskScoreHistory
from muhasebi.db.repositories.base import BaseRepository

logger = structlog.get_logger()


class RiskScoreHistoryRepository(BaseRepository[RiskScoreHistory, UUID]):
    """Repository for the append-only risk score ledger.

    Reads are always ordered by recorded_at ascending; insertion order is
    never relied upon.
    """

    model = RiskScoreHistory

    async def list_by_entity(
        self,
        tenant_id: UUID,
        entity_type: RiskEntityType,
        entity_id: UUID,
        since: datetime,
    ) -> list[RiskScoreHistory]:
        """Get observations for one entity recorded at or after `since`.

        Args:
            tenant_id: Owning tenant
            entity_type: Document or company
            entity_id: The scored entity
            since: Inclusive lower bound on recorded_at

        Returns:
            Observations ordered oldest first (empty if none)
        """
        stmt = (
            select(RiskScoreHistory)
            .where(RiskScoreHistory.tenant_id == tenant_id)
            .where(RiskScoreHistory.entity_type == entity_type.value)
            .where(RiskScoreHistory.entity_id == entity_id)
            .where(RiskScoreHistory.recorded_at >= since)
            .order_by(RiskScoreHistory.recorded_at.asc())
        )
        return await self._fetch(stmt, entity_type)

    async def list_by_tenant_scope(
        self,
        tenant_id: UUID,
        entity_type: RiskEntityType,
        since: datetime,
    ) -> list[RiskScoreHistory]:
        """Get observations for every entity of a type in the tenant.

        Returns:
            Observations ordered oldest first (empty if none)
        """
        stmt = (
            select(RiskScoreHistory)
            .where(RiskScoreHistory.tenant_id == tenant_id)
            .where(RiskScoreHistory.entity_type == entity_type.value)
            .where(RiskScoreHistory.recorded_at >= since)
            .order_by(RiskScoreHistory.recorded_at.asc())
        )
        return await self._fetch(stmt, entity_type)

    async def _fetch(self, stmt, entity_type: RiskEntityType) -> list[RiskScoreHistory]:
        start = time.perf_counter()
        result = await self.db.execute(stmt)
        rows = list(result.scalars().all())
        log_database_query(
            logger,
            query_type="select",
            table=RiskScoreHistory.__tablename__,
            duration_ms=(time.perf_counter() - start) * 1000,
            entity_type=entity_type.value,
            row_count=len(rows),
        )
        return rows
