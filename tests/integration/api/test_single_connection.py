"""Integration tests for requests served from a one-connection pool.

Authentication runs its lookups before the route opens a tenant
transaction. If both held a connection at the same time, every request
below would wait on the pool until it timed out.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from venuin.core.auth.dependencies import get_binder
from venuin.core.database import TenantContextBinder, build_engine, build_session_factory, get_db
from venuin.main import create_app
from venuin.modules.tenants.models import Tenant
from venuin.modules.users.models import User
from venuin.modules.venues.models import Venue
from tests.conftest import TEST_DATABASE_URL, assume_runtime_role, auth_headers_for
from tests.factories.user import UserCreateFactory
from tests.factories.venue import CustomerCreateFactory, VenueCreateFactory


pytestmark = pytest.mark.integration


class TestSingleConnectionPool:
    """Every request completes while holding at most one connection."""

    @pytest.fixture
    async def single_connection_engine(
        self, maintenance_engine: AsyncEngine
    ) -> AsyncGenerator[AsyncEngine, None]:
        engine = build_engine(
            TEST_DATABASE_URL,
            pool_size=1,
            max_overflow=0,
            pool_timeout=2,
            verify_context=True,
        )
        assume_runtime_role(engine)
        yield engine
        await engine.dispose()

    @pytest.fixture
    async def single_connection_client(
        self, single_connection_engine: AsyncEngine
    ) -> AsyncGenerator[AsyncClient, None]:
        factory: async_sessionmaker[AsyncSession] = build_session_factory(single_connection_engine)
        binder = TenantContextBinder(factory)
        application = create_app()

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            async with factory() as session:
                try:
                    yield session
                    await session.commit()
                except BaseException:
                    await session.rollback()
                    raise

        application.dependency_overrides[get_db] = override_get_db
        application.dependency_overrides[get_binder] = lambda: binder

        async with AsyncClient(
            transport=ASGITransport(app=application),
            base_url="http://test",
        ) as client:
            yield client

        application.dependency_overrides.clear()

    async def test_list_venues(
        self, single_connection_client: AsyncClient, admin_a: User, venue_a: Venue
    ):
        response = await single_connection_client.get(
            "/api/v1/venues", headers=auth_headers_for(admin_a)
        )

        assert response.status_code == 200
        assert [venue["id"] for venue in response.json()] == [str(venue_a.id)]

    async def test_create_venue(
        self, single_connection_client: AsyncClient, admin_a: User, tenant_a: Tenant
    ):
        response = await single_connection_client.post(
            "/api/v1/venues",
            json=VenueCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == str(tenant_a.id)

    async def test_create_user(
        self, single_connection_client: AsyncClient, admin_a: User, tenant_a: Tenant
    ):
        response = await single_connection_client.post(
            "/api/v1/users",
            json=UserCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == str(tenant_a.id)

    async def test_feature_gated_route(
        self, single_connection_client: AsyncClient, admin_a: User
    ):
        """The package lookup of the feature gate also gives its connection back."""
        created = await single_connection_client.post(
            "/api/v1/customers",
            json=CustomerCreateFactory.build().model_dump(mode="json"),
            headers=auth_headers_for(admin_a),
        )
        listed = await single_connection_client.get(
            "/api/v1/bookings", headers=auth_headers_for(admin_a)
        )

        assert created.status_code == 201
        assert listed.status_code == 200
        assert listed.json() == []
