"""Authentication service for login."""

from typing import Annotated

import structlog
from fastapi import Depends

from venuin.api.dependencies import DBSession
from venuin.config import settings
from venuin.core.auth.backend import create_access_token, verify_password
from venuin.core.auth.principal import Role
from venuin.core.auth.schemas import TokenResponse
from venuin.core.errors import AuthenticationError, AuthorizationError
from venuin.modules.tenants.repos import TenantRepository
from venuin.modules.users.models import User
from venuin.modules.users.repos import UserRepository


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)

    async def login(
        self,
        email: str,
        password: str,
        tenant_slug: str | None = None,
    ) -> tuple[User, TokenResponse]:
        """Authenticate a user with email and password.

        Tenant users and admins name their tenant by slug; super admins
        log in without one.

        Args:
            email: User's email address
            password: Plain text password
            tenant_slug: Slug of the user's tenant (None for super admins)

        Returns:
            Tuple of (user, token response)

        Raises:
            AuthenticationError: If the credentials are invalid
            AuthorizationError: If the tenant is suspended or cancelled
        """
        tenant = None
        if tenant_slug is not None:
            tenant = await self.tenant_repo.get_by_slug(tenant_slug)
            if tenant is None:
                raise AuthenticationError(error_code="invalid_credentials")

        user = await self.user_repo.get_by_email(email, tenant.id if tenant else None)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login_failed", tenant_slug=tenant_slug)
            raise AuthenticationError(error_code="invalid_credentials")

        if not user.is_active:
            raise AuthenticationError(error_code="user_inactive")

        if tenant is not None and not tenant.is_active:
            raise AuthorizationError(
                "Tenant is not active",
                error_code="tenant_inactive",
                details={"status": str(tenant.status)},
            )

        role = Role(user.role)
        token = create_access_token(user.id, user.tenant_id, role)
        logger.info(
            "login_succeeded",
            user_id=str(user.id),
            tenant_id=str(user.tenant_id) if user.tenant_id else None,
            role=role.value,
        )
        return user, TokenResponse(
            access_token=token,
            expires_in=settings.access_token_expire_minutes * 60,
        )


AuthSvc = Annotated[AuthService, Depends(AuthService)]
