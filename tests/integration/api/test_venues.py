"""Integration tests for tenant-scoped venue, customer and booking routes."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.auth.principal import Role
from venuin.modules.tenants.models import Tenant
from venuin.modules.users.models import User
from venuin.modules.venues.models import Venue
from tests.conftest import (
    auth_headers_for,
    create_package,
    create_tenant,
    create_user,
    create_venue,
)
from tests.factories.venue import CustomerCreateFactory, VenueCreateFactory


pytestmark = pytest.mark.integration


class TestVenues:
    """Tests for /api/v1/venues."""

    async def test_list_is_scoped_to_tenant(
        self, client: AsyncClient, admin_a: User, venue_a: Venue, venue_b: Venue
    ):
        """Admin A sees A's venues and nothing of B's."""
        response = await client.get("/api/v1/venues", headers=auth_headers_for(admin_a))

        assert response.status_code == 200
        assert [venue["id"] for venue in response.json()] == [str(venue_a.id)]

    async def test_create(self, client: AsyncClient, admin_a: User, tenant_a: Tenant):
        response = await client.post(
            "/api/v1/venues",
            json=VenueCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == str(tenant_a.id)

    async def test_venue_limit(
        self,
        client: AsyncClient,
        maintenance_session: AsyncSession,
        admin_a: User,
        tenant_a: Tenant,
        venue_b: Venue,
    ):
        """The package allows three venues; other tenants' venues do not count."""
        for _ in range(3):
            await create_venue(maintenance_session, tenant_a.id)

        response = await client.post(
            "/api/v1/venues",
            json=VenueCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 403

    async def test_duplicate_slug_in_tenant(
        self, client: AsyncClient, admin_a: User, venue_a: Venue
    ):
        response = await client.post(
            "/api/v1/venues",
            json=VenueCreateFactory.build(slug=venue_a.slug).model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 409

    async def test_user_without_permission(
        self, client: AsyncClient, maintenance_session: AsyncSession, tenant_a: Tenant
    ):
        """Tenant users only get what they were granted."""
        user = await create_user(maintenance_session, tenant_a.id, Role.TENANT_USER)

        response = await client.get("/api/v1/venues", headers=auth_headers_for(user))

        assert response.status_code == 403
        assert response.json()["detail"] == "Access forbidden"

    async def test_user_with_granted_permission(
        self, client: AsyncClient, maintenance_session: AsyncSession, tenant_a: Tenant, venue_a: Venue
    ):
        user = await create_user(
            maintenance_session, tenant_a.id, Role.TENANT_USER, permissions=["view_venues"]
        )

        response = await client.get("/api/v1/venues", headers=auth_headers_for(user))

        assert response.status_code == 200
        assert len(response.json()) == 1

    async def test_super_admin_needs_elevation(self, client: AsyncClient, super_admin: User):
        """Super admins hold no tenant permissions outside an elevation."""
        response = await client.get("/api/v1/venues", headers=auth_headers_for(super_admin))

        assert response.status_code == 403


class TestBookings:
    """Tests for /api/v1/bookings and the constraint layer behind it."""

    BOOKING_PERIOD = {
        "starts_at": "2026-11-20T18:00:00Z",
        "ends_at": "2026-11-20T23:00:00Z",
    }

    async def create_customer(self, client: AsyncClient, admin: User) -> str:
        response = await client.post(
            "/api/v1/customers",
            json=CustomerCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin),
        )
        assert response.status_code == 201
        return response.json()["id"]

    async def test_booking_in_own_tenant(self, client: AsyncClient, admin_a: User, venue_a: Venue):
        customer_id = await self.create_customer(client, admin_a)

        response = await client.post(
            "/api/v1/bookings",
            json={
                "venue_id": str(venue_a.id),
                "customer_id": customer_id,
                "event_name": "Wedding reception",
                **self.BOOKING_PERIOD,
            },
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 201

        listed = await client.get("/api/v1/bookings", headers=auth_headers_for(admin_a))
        assert [booking["id"] for booking in listed.json()] == [response.json()["id"]]

    async def test_booking_other_tenants_venue(
        self, client: AsyncClient, admin_a: User, venue_b: Venue
    ):
        """Referencing B's venue from A is rejected without revealing it exists."""
        customer_id = await self.create_customer(client, admin_a)

        response = await client.post(
            "/api/v1/bookings",
            json={
                "venue_id": str(venue_b.id),
                "customer_id": customer_id,
                "event_name": "Corporate dinner",
                **self.BOOKING_PERIOD,
            },
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 409
        assert str(venue_b.id) not in response.text

    async def test_package_without_bookings(
        self, client: AsyncClient, maintenance_session: AsyncSession
    ):
        """Bookings are only reachable when the package includes them."""
        package = await create_package(maintenance_session, features=["venue_management"])
        tenant = await create_tenant(maintenance_session, package)
        admin = await create_user(maintenance_session, tenant.id, Role.TENANT_ADMIN)

        response = await client.get("/api/v1/bookings", headers=auth_headers_for(admin))

        assert response.status_code == 403
        assert response.json()["detail"] == "Access forbidden"

    async def test_customers_are_scoped(self, client: AsyncClient, admin_a: User, admin_b: User):
        await self.create_customer(client, admin_a)

        response = await client.get("/api/v1/customers", headers=auth_headers_for(admin_b))

        assert response.status_code == 200
        assert response.json() == []


class TestReadiness:
    """Readiness includes the isolation self-check."""

    async def test_ready(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": "ok", "isolation": "ok"}
