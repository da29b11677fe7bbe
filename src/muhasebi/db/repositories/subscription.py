"""Tenant subscription repository."""

from uuid import UUID

from muhasebi.db.models.billing import TenantSubscription
from muhasebi.db.repositories.base import BaseRepository


class TenantSubscriptionRepository(BaseRepository[TenantSubscription, UUID]):
    """Repository for TenantSubscription rows, keyed by tenant_id."""

    model = TenantSubscription

    async def get_for_tenant(self, tenant_id: UUID) -> TenantSubscription | None:
        """Get the tenant's subscription row, if one was ever written."""
        return await self.get(tenant_id)
