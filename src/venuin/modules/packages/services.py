"""Subscription package service."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from venuin.core.errors import ConflictError, NotFoundError, ValidationError
from venuin.core.permissions.catalog import is_known_feature
from venuin.modules.packages.models import SubscriptionPackage
from venuin.modules.packages.repos import PackageRepo
from venuin.modules.packages.schemas import PackageCreate, PackageUpdate
from venuin.modules.tenants.repos import TenantRepo


logger = structlog.get_logger()


def _check_features(features: list[str]) -> list[str]:
    unknown = [feature for feature in features if not is_known_feature(feature)]
    if unknown:
        raise ValidationError(
            "Unknown features",
            error_code="unknown_feature",
            errors=[{"field": "features", "message": f"unknown feature {f}", "type": "unknown"} for f in unknown],
        )
    # Keep the given order, drop duplicates
    return list(dict.fromkeys(features))


class PackageService:
    """Package management for super admins.

    Changing a package's features changes the permissions of every tenant
    on it from the next request on; no user rows are rewritten.
    """

    def __init__(self, repo: PackageRepo, tenants: TenantRepo) -> None:
        self.repo = repo
        self.tenants = tenants

    async def get(self, package_id: UUID) -> SubscriptionPackage:
        package = await self.repo.get_by_id(package_id)
        if package is None:
            raise NotFoundError("Package not found", resource="package", resource_id=str(package_id))
        return package

    async def create(self, data: PackageCreate) -> SubscriptionPackage:
        if await self.repo.get_by_slug(data.slug):
            raise ConflictError(
                "Package slug already exists",
                error_code="package_slug_exists",
                details={"slug": data.slug},
            )
        values = data.model_dump()
        values["features"] = _check_features(data.features)
        package = await self.repo.create(SubscriptionPackage(**values))
        logger.info("package_created", package_id=str(package.id), slug=package.slug)
        return package

    async def update(self, package_id: UUID, data: PackageUpdate) -> SubscriptionPackage:
        package = await self.get(package_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("features") is not None:
            changes["features"] = _check_features(changes["features"])
        for field, value in changes.items():
            setattr(package, field, value)
        package = await self.repo.update(package)
        logger.info("package_updated", package_id=str(package.id), fields=sorted(changes))
        return package

    async def delete(self, package_id: UUID) -> None:
        """Delete a package that no tenant uses.

        Raises:
            ConflictError: If tenants are still assigned to it
        """
        package = await self.get(package_id)
        in_use = await self.tenants.count_by_package(package_id)
        if in_use:
            raise ConflictError(
                "Package is assigned to tenants",
                error_code="package_in_use",
                details={"tenant_count": in_use},
            )
        await self.repo.delete(package)
        logger.info("package_deleted", package_id=str(package_id))


PackageSvc = Annotated[PackageService, Depends(PackageService)]
