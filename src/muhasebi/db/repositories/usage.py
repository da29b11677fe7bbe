"""Usage counter repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from muhasebi.db.models.base import utcnow
from muhasebi.db.models.billing import TenantUsage, UsageMetricType
from muhasebi.db.repositories.base import BaseRepository


class TenantUsageRepository(BaseRepository[TenantUsage, UUID]):
    """Repository for per-tenant, per-metric, per-period usage counters."""

    model = TenantUsage

    async def get_value(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        period_start: datetime,
    ) -> int:
        """Get the consumed value for a period, 0 if no counter exists yet."""
        stmt = (
            select(TenantUsage.value)
            .where(TenantUsage.tenant_id == tenant_id)
            .where(TenantUsage.metric == metric.value)
            .where(TenantUsage.period_start == period_start)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def get_values(self, tenant_id: UUID, period_start: datetime) -> dict[UsageMetricType, int]:
        """Get every metric's consumed value for a period in one query.

        Metrics without a counter are reported as 0.
        """
        stmt = (
            select(TenantUsage.metric, TenantUsage.value)
            .where(TenantUsage.tenant_id == tenant_id)
            .where(TenantUsage.period_start == period_start)
        )
        result = await self.db.execute(stmt)
        stored = {metric: value for metric, value in result.all()}
        return {metric: stored.get(metric.value, 0) for metric in UsageMetricType}

    async def increment(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        period_start: datetime,
        period_end: datetime,
        amount: int = 1,
    ) -> None:
        """Add `amount` to a period counter, creating the counter if needed.

        The increment is a single UPDATE so concurrent increments never lose
        updates. The first counter of a period is inserted in a savepoint; if
        another writer created it first, only that savepoint is rolled back and
        the increment falls back to the UPDATE path. Commits the session.
        """
        if not await self._add(tenant_id, metric, period_start, amount):
            counter = TenantUsage(
                tenant_id=tenant_id,
                metric=metric.value,
                period_start=period_start,
                period_end=period_end,
                value=amount,
            )
            try:
                async with self.db.begin_nested():
                    self.db.add(counter)
                    await self.db.flush()
            except IntegrityError:
                await self._add(tenant_id, metric, period_start, amount)
        await self.db.commit()

    async def _add(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        period_start: datetime,
        amount: int,
    ) -> bool:
        stmt = (
            update(TenantUsage)
            .where(TenantUsage.tenant_id == tenant_id)
            .where(TenantUsage.metric == metric.value)
            .where(TenantUsage.period_start == period_start)
            .values(value=TenantUsage.value + amount, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0
