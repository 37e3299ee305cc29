"""Tenant provisioning and lifecycle service."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from venuin.core.auth.backend import hash_password
from venuin.core.auth.principal import Role
from venuin.core.errors import ConflictError, NotFoundError, ValidationError
from venuin.modules.packages.repos import PackageRepo
from venuin.modules.tenants.models import Tenant, TenantStatus
from venuin.modules.tenants.repos import TenantRepo
from venuin.modules.tenants.schemas import TenantCreate, TenantUpdate
from venuin.modules.users.models import User
from venuin.modules.users.repos import UserRepo


logger = structlog.get_logger()


class TenantService:
    """Super admin operations on tenants."""

    def __init__(self, repo: TenantRepo, packages: PackageRepo, users: UserRepo) -> None:
        self.repo = repo
        self.packages = packages
        self.users = users

    async def get(self, tenant_id: UUID) -> Tenant:
        tenant = await self.repo.get_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found", resource="tenant", resource_id=str(tenant_id))
        return tenant

    async def _check_package(self, package_id: UUID | None) -> None:
        if package_id is None:
            return
        package = await self.packages.get_by_id(package_id)
        if package is None or not package.is_active:
            raise ValidationError(
                "Unknown or inactive package",
                error_code="invalid_package",
                errors=[
                    {"field": "subscription_package_id", "message": "unknown or inactive package", "type": "invalid"}
                ],
            )

    async def create(self, data: TenantCreate) -> tuple[Tenant, User]:
        """Create a tenant and its first tenant admin.

        Raises:
            ConflictError: If the slug is taken
            ValidationError: If the package is unknown or inactive
        """
        if await self.repo.get_by_slug(data.slug):
            raise ConflictError(
                "Tenant slug already exists",
                error_code="tenant_slug_exists",
                details={"slug": data.slug},
            )
        await self._check_package(data.subscription_package_id)

        tenant = await self.repo.create(
            Tenant(
                name=data.name,
                slug=data.slug,
                status=TenantStatus.ACTIVE,
                subscription_package_id=data.subscription_package_id,
            )
        )
        admin = await self.users.create(
            User(
                tenant_id=tenant.id,
                email=data.admin_email.lower(),
                full_name=data.admin_full_name,
                password_hash=hash_password(data.admin_password),
                role=Role.TENANT_ADMIN.value,
            )
        )
        logger.info("tenant_created", tenant_id=str(tenant.id), slug=tenant.slug)
        return tenant, admin

    async def update(self, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        """Change status, name or package.

        A package change affects permissions from the next request on.
        """
        tenant = await self.get(tenant_id)
        changes = data.model_dump(exclude_unset=True)
        if "subscription_package_id" in changes:
            await self._check_package(changes["subscription_package_id"])

        for field, value in changes.items():
            setattr(tenant, field, value)
        tenant = await self.repo.update(tenant)

        logger.info(
            "tenant_updated",
            tenant_id=str(tenant.id),
            fields=sorted(changes),
            status=str(tenant.status),
        )
        return tenant


TenantSvc = Annotated[TenantService, Depends(TenantService)]
