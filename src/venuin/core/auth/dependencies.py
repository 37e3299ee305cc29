"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- Resolving the bearer token into a Principal with its permissions
- Restricting routes to super admins
- Providing the context binder used by tenant-scoped routes
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from venuin.core.auth.principal import Principal
from venuin.core.auth.resolver import resolve_principal
from venuin.core.database import TenantContextBinder, async_session_factory
from venuin.core.elevation import ElevationService
from venuin.core.errors import AuthorizationError
from venuin.core.permissions.resolver import PermissionResolver
from venuin.modules.packages.repos import PackageRepository
from venuin.modules.tenants.repos import TenantRepository
from venuin.modules.users.repos import UserRepository


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)

_binder = TenantContextBinder(async_session_factory)


def get_binder() -> TenantContextBinder:
    """The context binder on the application's session factory."""
    return _binder


Binder = Annotated[TenantContextBinder, Depends(get_binder)]


async def get_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    binder: Binder,
) -> Principal:
    """Resolve the caller into a Principal carrying its effective permissions.

    Built fresh for every request; nothing is cached between requests. The
    lookups run in their own session, which hands its connection back before
    the route opens a tenant transaction.

    Raises:
        AuthenticationError: If the credential does not resolve
        AuthorizationError: If the caller's tenant is not active
    """
    async with binder.session_factory() as session:
        users = UserRepository(session)
        principal = await resolve_principal(
            credentials.credentials if credentials else None,
            users=users,
            tenants=TenantRepository(session),
        )
        permissions = await PermissionResolver(PackageRepository(session), users).resolve(principal)
    principal = principal.with_permissions(permissions)

    # Log fields only; the database binding is done by the context binder
    request.state.user_id = principal.user_id
    request.state.tenant_id = principal.tenant_id
    request.state.role = principal.role.value
    structlog.contextvars.bind_contextvars(
        user_id=str(principal.user_id),
        tenant_id=str(principal.tenant_id) if principal.tenant_id else None,
        role=principal.role.value,
    )
    return principal


async def get_super_admin(
    principal: Annotated[Principal, Depends(get_principal)],
) -> Principal:
    """Get the current principal, ensuring it is a super admin.

    Raises:
        AuthorizationError: If the principal is not a super admin
    """
    if not principal.is_super_admin:
        raise AuthorizationError(
            "Super admin privileges required",
            error_code="not_super_admin",
        )
    return principal


# Type aliases for cleaner dependency injection
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
SuperAdmin = Annotated[Principal, Depends(get_super_admin)]


def get_elevation_service(binder: Binder) -> ElevationService:
    """Elevation service sharing the application's binder."""
    return ElevationService(binder.session_factory, binder=binder)


Elevation = Annotated[ElevationService, Depends(get_elevation_service)]
