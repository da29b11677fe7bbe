"""Read-only repository for risk alerts."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from muhasebi.db.models.risk import RiskAlert
from muhasebi.db.repositories.base import BaseRepository


class RiskAlertRepository(BaseRepository[RiskAlert, UUID]):
    """Repository for RiskAlert queries used by the trend dashboard."""

    model = RiskAlert

    async def list_created_since(self, tenant_id: UUID, since: datetime) -> list[RiskAlert]:
        """Get the tenant's alerts created at or after `since`, oldest first."""
        stmt = (
            select(RiskAlert)
            .where(RiskAlert.tenant_id == tenant_id)
            .where(RiskAlert.created_at >= since)
            .order_by(RiskAlert.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
