"""Usage counters and plan limit enforcement.

Creation flows are gated with check-then-increment:

    limiter = UsagePlanLimiter(db)
    async with limiter.consume(tenant_id, UsageMetricType.SCHEDULED_REPORTS):
        await create_scheduled_report(...)

The check and the increment are two separate statements, so two concurrent
requests may both pass the check and overshoot the ceiling by one.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.billing.subscription import SubscriptionService
from muhasebi.core.exceptions import UsageLimitExceededError
from muhasebi.db.models.billing import UsageMetricType
from muhasebi.db.repositories.usage import TenantUsageRepository

logger = structlog.get_logger()


LIMIT_EXCEEDED_MESSAGES: dict[UsageMetricType, str] = {
    UsageMetricType.CLIENT_COMPANIES: (
        "Maksimum müşteri şirket limitine ulaşıldı. "
        "Daha fazla şirket eklemek için planınızı yükseltmeniz gerekiyor."
    ),
    UsageMetricType.DOCUMENTS: (
        "Bu ay için belge yükleme limitine ulaşıldı. "
        "Daha fazla belge yüklemek için planınızı yükseltmeniz gerekiyor."
    ),
    UsageMetricType.AI_ANALYSES: (
        "Bu ay için yapay zeka analiz limitine ulaşıldı. "
        "Daha fazla analiz için planınızı yükseltmeniz gerekiyor."
    ),
    UsageMetricType.USERS: (
        "Maksimum kullanıcı limitine ulaşıldı. "
        "Daha fazla kullanıcı eklemek için planınızı yükseltmeniz gerekiyor."
    ),
    UsageMetricType.SCHEDULED_REPORTS: (
        "Maksimum zamanlanmış rapor limitine ulaşıldı. "
        "Daha fazla rapor eklemek için planınızı yükseltmeniz gerekiyor."
    ),
}


@dataclass(frozen=True)
class UsagePeriod:
    """A billing period: the calendar month in UTC."""

    start: datetime
    end: datetime

    @classmethod
    def containing(cls, moment: datetime) -> "UsagePeriod":
        """The calendar month (UTC) that contains `moment` (naive values are taken as UTC)."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        else:
            moment = moment.astimezone(UTC)
        start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        if start.month == 12:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return cls(start=start, end=end)


@dataclass(frozen=True)
class LimitCheckResult:
    """Outcome of a limit check."""

    allowed: bool
    remaining: int
    limit: int


@dataclass(frozen=True)
class MetricUsage:
    """Consumption of one metric in the current period."""

    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


@dataclass(frozen=True)
class UsageSummary:
    """Consumption of every metric for a tenant in one period."""

    tenant_id: UUID
    period: UsagePeriod
    metrics: dict[UsageMetricType, MetricUsage]

    def __getitem__(self, metric: UsageMetricType) -> MetricUsage:
        return self.metrics[metric]


class UsagePlanLimiter:
    """Answers "may this tenant create one more X?" and meters consumption."""

    def __init__(self, db: AsyncSession, subscriptions: SubscriptionService | None = None):
        self.db = db
        self._usage = TenantUsageRepository(db)
        self._subscriptions = subscriptions or SubscriptionService(db)

    async def _limit_for(self, tenant_id: UUID, metric: UsageMetricType) -> int:
        subscription = await self._subscriptions.get_tenant_subscription(tenant_id)
        return subscription.plan_config.limit_for(metric)

    async def check_limit(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        *,
        now: datetime | None = None,
    ) -> LimitCheckResult:
        """Check whether the tenant may consume one more unit of `metric`."""
        metric = UsageMetricType(metric)
        period = UsagePeriod.containing(now or datetime.now(UTC))
        limit = await self._limit_for(tenant_id, metric)
        used = await self._usage.get_value(tenant_id, metric, period.start)
        return LimitCheckResult(
            allowed=used < limit,
            remaining=max(0, limit - used),
            limit=limit,
        )

    async def increment_usage(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        delta: int = 1,
        *,
        now: datetime | None = None,
    ) -> None:
        """Add `delta` to the tenant's counter for the current month."""
        metric = UsageMetricType(metric)
        period = UsagePeriod.containing(now or datetime.now(UTC))
        await self._usage.increment(tenant_id, metric, period.start, period.end, delta)
        logger.debug(
            "usage_incremented",
            tenant_id=str(tenant_id),
            metric=metric.value,
            delta=delta,
        )

    async def enforce_limit(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        *,
        now: datetime | None = None,
    ) -> LimitCheckResult:
        """Check the limit and raise if it is exhausted.

        Raises:
            UsageLimitExceededError: If the tenant has no allowance left
        """
        metric = UsageMetricType(metric)
        result = await self.check_limit(tenant_id, metric, now=now)
        if not result.allowed:
            logger.info(
                "usage_limit_exceeded",
                tenant_id=str(tenant_id),
                metric=metric.value,
                limit=result.limit,
            )
            raise UsageLimitExceededError(
                LIMIT_EXCEEDED_MESSAGES[metric],
                tenant_id=tenant_id,
                metric=metric.value,
                limit=result.limit,
            )
        return result

    @asynccontextmanager
    async def consume(
        self,
        tenant_id: UUID,
        metric: UsageMetricType,
        delta: int = 1,
    ) -> AsyncIterator[LimitCheckResult]:
        """Gate a creation flow on the tenant's allowance.

        The limit is enforced on entry; the counter is incremented only if
        the body completes without raising.
        """
        result = await self.enforce_limit(tenant_id, metric)
        yield result
        await self.increment_usage(tenant_id, metric, delta)

    async def get_usage_for_tenant(
        self,
        tenant_id: UUID,
        *,
        now: datetime | None = None,
    ) -> UsageSummary:
        """Used/limit/remaining for every metric in the current month."""
        period = UsagePeriod.containing(now or datetime.now(UTC))
        subscription = await self._subscriptions.get_tenant_subscription(tenant_id)
        values = await self._usage.get_values(tenant_id, period.start)
        return UsageSummary(
            tenant_id=tenant_id,
            period=period,
            metrics={
                metric: MetricUsage(used=values[metric], limit=subscription.plan_config.limit_for(metric))
                for metric in UsageMetricType
            },
        )

