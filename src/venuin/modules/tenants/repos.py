"""Tenant repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from venuin.api.dependencies import DBSession
from venuin.modules.tenants.models import Tenant, TenantStatus


class TenantRepository:
    """Repository for Tenant database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, tenant: Tenant) -> Tenant:
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def get_by_id(self, tenant_id: UUID) -> Tenant | None:
        """Get a tenant by ID, with its subscription package loaded."""
        result = await self.session.execute(select(Tenant).where(Tenant.id == tenant_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Tenant | None:
        result = await self.session.execute(select(Tenant).where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def exists(self, tenant_id: UUID) -> bool:
        stmt = select(func.count()).select_from(Tenant).where(Tenant.id == tenant_id)
        return (await self.session.execute(stmt)).scalar_one() > 0

    async def list_all(
        self,
        status: TenantStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Tenant], int]:
        """List tenants, optionally filtered by status.

        Returns:
            Tuple of (tenants list, total count)
        """
        count_stmt = select(func.count()).select_from(Tenant)
        stmt = select(Tenant).order_by(Tenant.name)
        if status is not None:
            count_stmt = count_stmt.where(Tenant.status == status)
            stmt = stmt.where(Tenant.status == status)

        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(stmt.offset((page - 1) * page_size).limit(page_size))
        return list(result.scalars().all()), total

    async def count_by_package(self, package_id: UUID) -> int:
        """Number of tenants assigned to a package."""
        stmt = (
            select(func.count())
            .select_from(Tenant)
            .where(Tenant.subscription_package_id == package_id)
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def update(self, tenant: Tenant) -> Tenant:
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant


TenantRepo = Annotated[TenantRepository, Depends(TenantRepository)]
