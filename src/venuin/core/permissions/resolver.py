"""Permission resolution.

Permissions are derived, never stored for admins: a tenant admin's set is
recomputed from the tenant's current package on every request, so a package
change takes effect on the next request without touching any user row.
"""

from collections.abc import Iterable
from typing import Any, Protocol
from uuid import UUID

import structlog

from venuin.core.auth.principal import PermissionSet, Principal, Role
from venuin.core.permissions.catalog import (
    BASE_ADMIN_PERMISSIONS,
    SUPER_ADMIN_PERMISSIONS,
    permissions_for_features,
)


logger = structlog.get_logger()


def resolve_permissions(
    principal: Principal,
    package_features: Iterable[str],
    stored_permissions: Iterable[str] = (),
) -> PermissionSet:
    """Compute the effective permission set of a principal.

    - super_admin: the fixed platform set (no tenant permissions)
    - tenant_admin: base set plus the permissions of every package feature
    - tenant_user: stored permissions restricted to what the package allows

    Args:
        principal: The principal to resolve for
        package_features: Feature ids of the tenant's current package
        stored_permissions: Permissions granted to a tenant_user

    Returns:
        Frozen permission set
    """
    if principal.role is Role.SUPER_ADMIN:
        return SUPER_ADMIN_PERMISSIONS

    available = BASE_ADMIN_PERMISSIONS | permissions_for_features(tuple(package_features))
    if principal.role is Role.TENANT_ADMIN:
        return available

    return frozenset(stored_permissions) & available


def has_permission(permissions: PermissionSet, permission: str) -> bool:
    """Whether ``permission`` is in the resolved set."""
    return permission in permissions


class PackageLookup(Protocol):
    async def get_for_tenant(self, tenant_id: UUID) -> Any | None: ...


class StoredPermissionLookup(Protocol):
    async def get_permissions(self, user_id: UUID) -> list[str]: ...


class PermissionResolver:
    """Loads package features and stored grants, then resolves.

    Args:
        packages: Read-only package lookup
        users: Read-only user lookup
    """

    def __init__(self, packages: PackageLookup, users: StoredPermissionLookup) -> None:
        self.packages = packages
        self.users = users

    async def package_features(self, tenant_id: UUID | None) -> list[str]:
        """Features of the tenant's active package (none without a package)."""
        if tenant_id is None:
            return []
        package = await self.packages.get_for_tenant(tenant_id)
        if package is None or not package.is_active:
            return []
        return list(package.features or [])

    async def resolve(self, principal: Principal) -> PermissionSet:
        """Resolve the effective permissions of ``principal``."""
        features = await self.package_features(principal.tenant_id)
        stored: list[str] = []
        if principal.role is Role.TENANT_USER:
            stored = await self.users.get_permissions(principal.user_id)

        permissions = resolve_permissions(principal, features, stored)
        logger.debug(
            "permissions_resolved",
            user_id=str(principal.user_id),
            role=principal.role.value,
            count=len(permissions),
        )
        return permissions
