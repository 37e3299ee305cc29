"""Permission and feature gates as FastAPI dependencies.

Usage:
    @router.post("/venues", dependencies=[Depends(require_permission("manage_venues"))])
    async def create_venue(...): ...

    @router.get("/proposals")
    async def list_proposals(principal: Annotated[Principal, Depends(require_feature("proposal_system"))]):
        ...
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

import structlog
from fastapi import Depends, Request

from venuin.core.auth.dependencies import Binder, get_principal
from venuin.core.auth.principal import Principal
from venuin.core.errors import AuthorizationError, MissingTenantContextError
from venuin.core.permissions.features import ensure_feature
from venuin.core.permissions.resolver import has_permission
from venuin.modules.packages.repos import PackageRepository


logger = structlog.get_logger()


def require_permission(permission: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory requiring ``permission`` in the resolved set.

    Args:
        permission: The permission id (e.g. ``manage_venues``)

    Returns:
        A dependency returning the principal when allowed

    Raises:
        AuthorizationError: If the permission is missing
    """

    async def dependency(
        request: Request,
        principal: Annotated[Principal, Depends(get_principal)],
    ) -> Principal:
        if not has_permission(principal.effective_permissions, permission):
            logger.info(
                "permission_denied",
                user_id=str(principal.user_id),
                permission=permission,
                path=request.url.path,
            )
            raise AuthorizationError(
                "Missing required permission",
                error_code="permission_denied",
                details={"required_permission": permission},
            )
        return principal

    return dependency


def require_feature(feature: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory requiring ``feature`` in the tenant's package.

    Raises:
        MissingTenantContextError: If the principal has no tenant
        AuthorizationError: feature_not_available
    """

    async def dependency(
        principal: Annotated[Principal, Depends(get_principal)],
        binder: Binder,
    ) -> Principal:
        if principal.tenant_id is None:
            raise MissingTenantContextError()
        async with binder.session_factory() as session:
            package = await PackageRepository(session).get_for_tenant(principal.tenant_id)
        ensure_feature(package.features if package and package.is_active else None, feature)
        return principal

    return dependency
