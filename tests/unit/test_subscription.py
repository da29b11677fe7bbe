"""Unit tests for SubscriptionService."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.billing import SubscriptionService, get_plan_config
from muhasebi.db.models.billing import SubscriptionPlan, SubscriptionStatus
from muhasebi.db.repositories import TenantSubscriptionRepository


class TestSubscriptionService:
    """Tests for SubscriptionService."""

    @pytest_asyncio.fixture
    async def service(self, db_session: AsyncSession) -> SubscriptionService:
        return SubscriptionService(db_session)

    @pytest.mark.asyncio
    async def test_default_is_free_active(self, service, tenant_id):
        """Test a tenant that never subscribed is on an active FREE plan."""
        view = await service.get_tenant_subscription(tenant_id)

        assert view.plan == SubscriptionPlan.FREE
        assert view.status == SubscriptionStatus.ACTIVE
        assert view.valid_until is None
        assert view.trial_until is None
        assert view.plan_config == get_plan_config(SubscriptionPlan.FREE)

    @pytest.mark.asyncio
    async def test_default_is_not_persisted(self, db_session, service, tenant_id):
        """Test reading the default does not create a row."""
        await service.get_tenant_subscription(tenant_id)

        assert await TenantSubscriptionRepository(db_session).get_for_tenant(tenant_id) is None

    @pytest.mark.asyncio
    async def test_update_creates_row(self, service, tenant_id):
        """Test the first update creates the subscription."""
        view = await service.update_tenant_subscription(tenant_id, plan=SubscriptionPlan.PRO)

        assert view.plan == SubscriptionPlan.PRO
        assert view.status == SubscriptionStatus.ACTIVE
        assert view.plan_config.max_scheduled_reports == 10

        reloaded = await service.get_tenant_subscription(tenant_id)
        assert reloaded.plan == SubscriptionPlan.PRO

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, service, tenant_id):
        """Test omitted fields are left unchanged."""
        valid_until = datetime(2027, 1, 1, tzinfo=UTC)
        await service.update_tenant_subscription(
            tenant_id, plan=SubscriptionPlan.ENTERPRISE, valid_until=valid_until
        )

        view = await service.update_tenant_subscription(
            tenant_id, status=SubscriptionStatus.PAST_DUE
        )

        assert view.plan == SubscriptionPlan.ENTERPRISE
        assert view.status == SubscriptionStatus.PAST_DUE
        assert view.valid_until == valid_until

    @pytest.mark.asyncio
    async def test_none_clears_dates(self, service, tenant_id):
        """Test passing None explicitly clears a date."""
        trial_until = datetime.now(UTC) + timedelta(days=14)
        await service.update_tenant_subscription(tenant_id, trial_until=trial_until)

        view = await service.update_tenant_subscription(tenant_id, trial_until=None)

        assert view.trial_until is None

    @pytest.mark.asyncio
    async def test_limits_follow_plan_not_status(self, service, tenant_id):
        """Test a cancelled PRO subscription still reports PRO limits."""
        view = await service.update_tenant_subscription(
            tenant_id, plan=SubscriptionPlan.PRO, status=SubscriptionStatus.CANCELLED
        )

        assert view.plan_config == get_plan_config(SubscriptionPlan.PRO)
