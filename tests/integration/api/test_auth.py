"""Integration tests for login and identity resolution."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.modules.tenants.models import Tenant, TenantStatus
from venuin.modules.users.models import User
from tests.conftest import auth_headers_for
from tests.factories.user import TEST_PASSWORD


pytestmark = pytest.mark.integration


class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    async def test_tenant_admin_login(self, client: AsyncClient, admin_a: User, tenant_a: Tenant):
        """Valid credentials yield a bearer token accepted by /me."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": admin_a.email, "password": TEST_PASSWORD, "tenant_slug": tenant_a.slug},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"

        me = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {body['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["tenant_id"] == str(tenant_a.id)
        assert me.json()["role"] == "tenant_admin"
        assert "manage_events" in me.json()["permissions"]

    async def test_super_admin_login_without_slug(self, client: AsyncClient, super_admin: User):
        """Super admins have no tenant."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": super_admin.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200

    async def test_wrong_password(self, client: AsyncClient, admin_a: User, tenant_a: Tenant):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": admin_a.email, "password": "Wrong-Pass-1", "tenant_slug": tenant_a.slug},
        )

        assert response.status_code == 401

    async def test_user_of_another_tenant(self, client: AsyncClient, admin_a: User, tenant_b: Tenant):
        """Users are looked up within the named tenant only."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": admin_a.email, "password": TEST_PASSWORD, "tenant_slug": tenant_b.slug},
        )

        assert response.status_code == 401

    async def test_unknown_slug(self, client: AsyncClient, admin_a: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": admin_a.email, "password": TEST_PASSWORD, "tenant_slug": "no-such-tenant"},
        )

        assert response.status_code == 401

    async def test_suspended_tenant(
        self,
        client: AsyncClient,
        maintenance_session: AsyncSession,
        admin_a: User,
        tenant_a: Tenant,
    ):
        """Suspended tenants cannot log in."""
        tenant_a.status = TenantStatus.SUSPENDED
        await maintenance_session.commit()

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": admin_a.email, "password": TEST_PASSWORD, "tenant_slug": tenant_a.slug},
        )

        assert response.status_code == 403


class TestMe:
    """Tests for GET /api/v1/auth/me."""

    async def test_super_admin_has_platform_permissions_only(
        self, client: AsyncClient, super_admin: User
    ):
        response = await client.get("/api/v1/auth/me", headers=auth_headers_for(super_admin))

        assert response.status_code == 200
        body = response.json()
        assert body["tenant_id"] is None
        assert "assume_tenant" in body["permissions"]
        assert "view_venues" not in body["permissions"]
