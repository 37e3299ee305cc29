"""Tests for the application shell: health, info, request IDs and auth gate.

None of these touch the database.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from venuin.main import create_app


@pytest.fixture
async def api_client():
    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_liveness_endpoint(api_client: AsyncClient):
    """Test that liveness endpoint returns 200."""
    response = await api_client.get("/health/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"


@pytest.mark.asyncio
async def test_info_endpoint(api_client: AsyncClient):
    """Test that info endpoint returns application metadata."""
    response = await api_client.get("/info")

    assert response.status_code == 200
    data = response.json()
    assert data["app"] == "Venuin"
    assert "environment" in data


@pytest.mark.asyncio
async def test_request_id_is_echoed(api_client: AsyncClient):
    """A client-supplied request ID is returned unchanged."""
    response = await api_client.get("/health/live", headers={"X-Request-ID": "req-abc"})

    assert response.headers["X-Request-ID"] == "req-abc"


@pytest.mark.asyncio
async def test_request_id_is_generated(api_client: AsyncClient):
    """Requests without an ID get one."""
    response = await api_client.get("/health/live")

    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/v1/venues", "/api/v1/auth/me", "/api/v1/super-admin/tenants"])
async def test_missing_credentials(api_client: AsyncClient, path: str):
    """Tenant and platform routes refuse anonymous callers."""
    response = await api_client.get(path)

    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


@pytest.mark.asyncio
async def test_garbage_token(api_client: AsyncClient):
    """A malformed token gets the same answer as no token."""
    response = await api_client.get(
        "/api/v1/venues", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"
