"""Subscription package repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from venuin.api.dependencies import DBSession
from venuin.modules.packages.models import SubscriptionPackage
from venuin.modules.tenants.models import Tenant


class PackageRepository:
    """Repository for SubscriptionPackage database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, package: SubscriptionPackage) -> SubscriptionPackage:
        self.session.add(package)
        await self.session.flush()
        await self.session.refresh(package)
        return package

    async def get_by_id(self, package_id: UUID) -> SubscriptionPackage | None:
        result = await self.session.execute(
            select(SubscriptionPackage).where(SubscriptionPackage.id == package_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> SubscriptionPackage | None:
        result = await self.session.execute(
            select(SubscriptionPackage).where(SubscriptionPackage.slug == slug)
        )
        return result.scalar_one_or_none()

    async def get_for_tenant(self, tenant_id: UUID) -> SubscriptionPackage | None:
        """The package currently assigned to a tenant, if any."""
        stmt = (
            select(SubscriptionPackage)
            .join(Tenant, Tenant.subscription_package_id == SubscriptionPackage.id)
            .where(Tenant.id == tenant_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, include_inactive: bool = False) -> list[SubscriptionPackage]:
        stmt = select(SubscriptionPackage).order_by(SubscriptionPackage.price_monthly)
        if not include_inactive:
            stmt = stmt.where(SubscriptionPackage.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, package: SubscriptionPackage) -> SubscriptionPackage:
        await self.session.flush()
        await self.session.refresh(package)
        return package

    async def delete(self, package: SubscriptionPackage) -> None:
        await self.session.delete(package)
        await self.session.flush()


PackageRepo = Annotated[PackageRepository, Depends(PackageRepository)]
