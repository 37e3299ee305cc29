"""Integration tests for package-driven permission resolution."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.auth.principal import Principal, Role
from venuin.core.permissions.resolver import PermissionResolver
from venuin.modules.packages.models import SubscriptionPackage
from venuin.modules.packages.repos import PackageRepository
from venuin.modules.tenants.models import Tenant
from venuin.modules.users.models import User
from venuin.modules.users.repos import UserRepository
from tests.conftest import create_package, create_tenant, create_user


pytestmark = pytest.mark.integration


@pytest.fixture
async def professional(maintenance_session: AsyncSession) -> SubscriptionPackage:
    return await create_package(
        maintenance_session,
        features=["venue_management", "event_booking", "proposal_system"],
    )


@pytest.fixture
async def tenant(maintenance_session: AsyncSession, professional: SubscriptionPackage) -> Tenant:
    return await create_tenant(maintenance_session, professional)


@pytest.fixture
async def alice(maintenance_session: AsyncSession, tenant: Tenant) -> User:
    """A tenant user granted booking and proposal permissions."""
    return await create_user(
        maintenance_session,
        tenant.id,
        Role.TENANT_USER,
        permissions=["view_events", "manage_events", "view_proposals"],
    )


def resolver_for(db: AsyncSession) -> PermissionResolver:
    return PermissionResolver(PackageRepository(db), UserRepository(db))


class TestPackagePermissions:
    """Tests for PermissionResolver against stored packages and users."""

    async def test_stored_grants_within_package(self, db: AsyncSession, alice: User, tenant: Tenant):
        """Alice keeps every grant her package covers."""
        principal = Principal(user_id=alice.id, tenant_id=tenant.id, role=Role.TENANT_USER)

        permissions = await resolver_for(db).resolve(principal)

        assert permissions == {"view_events", "manage_events", "view_proposals"}

    async def test_downgrade_takes_effect_without_touching_users(
        self,
        db: AsyncSession,
        maintenance_session: AsyncSession,
        professional: SubscriptionPackage,
        alice: User,
        tenant: Tenant,
    ):
        """Dropping a feature removes it on the next resolution."""
        professional.features = ["venue_management", "event_booking"]
        await maintenance_session.commit()

        principal = Principal(user_id=alice.id, tenant_id=tenant.id, role=Role.TENANT_USER)
        permissions = await resolver_for(db).resolve(principal)

        assert permissions == {"view_events", "manage_events"}

        await maintenance_session.refresh(alice)
        assert "view_proposals" in alice.permissions

    async def test_admin_follows_package(
        self,
        db: AsyncSession,
        maintenance_session: AsyncSession,
        professional: SubscriptionPackage,
        tenant: Tenant,
    ):
        """Admin permissions are derived from the package, never stored."""
        admin = await create_user(maintenance_session, tenant.id, Role.TENANT_ADMIN)
        principal = Principal(user_id=admin.id, tenant_id=tenant.id, role=Role.TENANT_ADMIN)

        before = await resolver_for(db).resolve(principal)
        professional.features = ["venue_management"]
        await maintenance_session.commit()
        after = await resolver_for(db).resolve(principal)

        assert "manage_proposals" in before
        assert "manage_proposals" not in after
        assert "manage_venues" in after

    async def test_inactive_package_grants_no_features(
        self,
        db: AsyncSession,
        maintenance_session: AsyncSession,
        professional: SubscriptionPackage,
        alice: User,
        tenant: Tenant,
    ):
        """A deactivated package contributes nothing."""
        professional.is_active = False
        await maintenance_session.commit()

        principal = Principal(user_id=alice.id, tenant_id=tenant.id, role=Role.TENANT_USER)

        assert await resolver_for(db).resolve(principal) == frozenset()
