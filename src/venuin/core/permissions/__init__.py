"""Permission resolution and package gating."""

from venuin.core.permissions.catalog import (
    BASE_ADMIN_PERMISSIONS,
    FEATURE_PERMISSIONS,
    SUPER_ADMIN_PERMISSIONS,
    TENANT_PERMISSIONS,
    permissions_for_features,
)
from venuin.core.permissions.features import PackageLimits, ensure_feature
from venuin.core.permissions.resolver import (
    PermissionResolver,
    has_permission,
    resolve_permissions,
)


__all__ = [
    "BASE_ADMIN_PERMISSIONS",
    "FEATURE_PERMISSIONS",
    "SUPER_ADMIN_PERMISSIONS",
    "TENANT_PERMISSIONS",
    "PackageLimits",
    "PermissionResolver",
    "ensure_feature",
    "has_permission",
    "permissions_for_features",
    "resolve_permissions",
]
