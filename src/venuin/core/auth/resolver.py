"""Identity resolution: verified credential to Principal.

The resolver trusts nothing in the token beyond its signature. The claimed
tenant and role are compared with what is persisted for the user; any
mismatch is an authentication failure, never a fallback to "no tenant".
"""

from typing import Any, Protocol
from uuid import UUID

import structlog

from venuin.core.auth.backend import decode_token
from venuin.core.auth.principal import Principal, Role
from venuin.core.errors import AuthenticationError, AuthorizationError


logger = structlog.get_logger()


class UserLookup(Protocol):
    async def get_by_id(self, user_id: UUID) -> Any | None: ...


class TenantLookup(Protocol):
    async def get_by_id(self, tenant_id: UUID) -> Any | None: ...


def _reject(reason: str, **context: Any) -> AuthenticationError:
    logger.info("authentication_rejected", reason=reason, **context)
    return AuthenticationError(error_code=reason)


async def resolve_principal(
    credential: str | None,
    users: UserLookup,
    tenants: TenantLookup,
) -> Principal:
    """Resolve a bearer credential into a Principal.

    Args:
        credential: The raw bearer token (None if absent)
        users: Read-only user lookup
        tenants: Read-only tenant lookup

    Returns:
        A Principal without permissions (the permission resolver adds them)

    Raises:
        AuthenticationError: Missing, malformed, expired or non-access
            token; unknown or inactive user; tenant or role mismatch
        AuthorizationError: The user's tenant is suspended or cancelled
    """
    if not credential:
        raise _reject("missing_token")

    token = decode_token(credential)
    if token is None:
        raise _reject("invalid_token")
    if token.type != "access":
        raise _reject("invalid_token_type")

    user = await users.get_by_id(token.user_id)
    if user is None:
        raise _reject("user_not_found", user_id=str(token.user_id))
    if not user.is_active:
        raise _reject("user_inactive", user_id=str(token.user_id))

    if user.tenant_id != token.tenant_id:
        raise _reject(
            "tenant_mismatch",
            user_id=str(user.id),
            claimed_tenant_id=str(token.tenant_id),
        )

    try:
        role = Role(user.role)
    except ValueError:
        raise _reject("unknown_role", user_id=str(user.id)) from None
    if role is not token.role:
        raise _reject("role_mismatch", user_id=str(user.id), claimed_role=token.role.value)

    if user.tenant_id is not None:
        tenant = await tenants.get_by_id(user.tenant_id)
        if tenant is None:
            raise _reject("tenant_not_found", tenant_id=str(user.tenant_id))
        if not tenant.is_active:
            logger.info(
                "tenant_access_blocked",
                tenant_id=str(tenant.id),
                status=str(tenant.status),
            )
            raise AuthorizationError(
                "Tenant is not active",
                error_code="tenant_inactive",
                details={"status": str(tenant.status)},
            )

    try:
        return Principal(user_id=user.id, tenant_id=user.tenant_id, role=role)
    except ValueError:
        # Stored row violates the role/tenant pairing
        raise _reject("invalid_principal", user_id=str(user.id)) from None
