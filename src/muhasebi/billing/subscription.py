"""Tenant subscription lookup and updates."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.billing.plans import PlanConfig, get_plan_config
from muhasebi.db.models.billing import SubscriptionPlan, SubscriptionStatus, TenantSubscription
from muhasebi.db.repositories.subscription import TenantSubscriptionRepository

logger = structlog.get_logger()

_UNSET: Any = object()


@dataclass(frozen=True)
class TenantSubscriptionView:
    """A tenant's subscription together with the ceilings of its plan."""

    tenant_id: UUID
    plan: SubscriptionPlan
    status: SubscriptionStatus
    valid_until: datetime | None
    trial_until: datetime | None
    plan_config: PlanConfig

    @classmethod
    def from_row(cls, row: TenantSubscription) -> "TenantSubscriptionView":
        plan = SubscriptionPlan(row.plan)
        return cls(
            tenant_id=row.tenant_id,
            plan=plan,
            status=SubscriptionStatus(row.status),
            valid_until=row.valid_until,
            trial_until=row.trial_until,
            plan_config=get_plan_config(plan),
        )

    @classmethod
    def default_for(cls, tenant_id: UUID) -> "TenantSubscriptionView":
        """Subscription of a tenant that never subscribed: active FREE plan."""
        return cls(
            tenant_id=tenant_id,
            plan=SubscriptionPlan.FREE,
            status=SubscriptionStatus.ACTIVE,
            valid_until=None,
            trial_until=None,
            plan_config=get_plan_config(SubscriptionPlan.FREE),
        )


class SubscriptionService:
    """Reads and updates tenant subscriptions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._repository = TenantSubscriptionRepository(db)

    async def get_tenant_subscription(self, tenant_id: UUID) -> TenantSubscriptionView:
        """Get the tenant's subscription, defaulting to the FREE plan."""
        row = await self._repository.get_for_tenant(tenant_id)
        if row is None:
            return TenantSubscriptionView.default_for(tenant_id)
        return TenantSubscriptionView.from_row(row)

    async def update_tenant_subscription(
        self,
        tenant_id: UUID,
        *,
        plan: SubscriptionPlan | None = None,
        status: SubscriptionStatus | None = None,
        valid_until: datetime | None = _UNSET,
        trial_until: datetime | None = _UNSET,
    ) -> TenantSubscriptionView:
        """Create or update the tenant's subscription.

        Only the given fields change. valid_until/trial_until accept None to
        clear the date.
        """
        updates: dict[str, Any] = {}
        if plan is not None:
            updates["plan"] = SubscriptionPlan(plan).value
        if status is not None:
            updates["status"] = SubscriptionStatus(status).value
        if valid_until is not _UNSET:
            updates["valid_until"] = valid_until
        if trial_until is not _UNSET:
            updates["trial_until"] = trial_until

        row = await self._repository.get_for_tenant(tenant_id)
        if row is None:
            row = await self._repository.create(
                TenantSubscription(
                    tenant_id=tenant_id,
                    plan=updates.get("plan", SubscriptionPlan.FREE.value),
                    status=updates.get("status", SubscriptionStatus.ACTIVE.value),
                    valid_until=updates.get("valid_until"),
                    trial_until=updates.get("trial_until"),
                )
            )
        else:
            row = await self._repository.update(row, updates)

        logger.info(
            "tenant_subscription_updated",
            tenant_id=str(tenant_id),
            plan=row.plan,
            status=row.status,
        )
        return TenantSubscriptionView.from_row(row)
