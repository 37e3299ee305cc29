"""User service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from venuin.core.auth.backend import hash_password
from venuin.core.auth.principal import Principal, Role
from venuin.core.errors import (
    AuthorizationError,
    ConflictError,
    MissingTenantContextError,
    ValidationError,
)
from venuin.core.permissions.catalog import TENANT_PERMISSIONS
from venuin.core.permissions.features import PackageLimits
from venuin.modules.packages.repos import PackageRepo
from venuin.modules.users.models import User
from venuin.modules.users.repos import UserRepo
from venuin.modules.users.schemas import UserCreate


logger = structlog.get_logger()


class UserService:
    """Service for managing the users of a tenant."""

    def __init__(self, repo: UserRepo, packages: PackageRepo) -> None:
        self.repo = repo
        self.packages = packages

    async def create_user(self, data: UserCreate, creator: Principal) -> User:
        """Add a user to the creator's tenant.

        Stored permissions are only kept for tenant users; an admin's set
        is always derived from the package. A creator can hand out neither
        a role above its own nor permissions it does not hold.

        Raises:
            ValidationError: If a permission id is unknown
            AuthorizationError: If the creator would grant more than it holds,
                or the package's user limit is reached
            ConflictError: If the email is already used in the tenant
        """
        unknown = sorted(set(data.permissions) - TENANT_PERMISSIONS)
        if unknown:
            raise ValidationError(
                "Unknown permissions",
                error_code="unknown_permission",
                errors=[
                    {"field": "permissions", "message": f"unknown permission {p}", "type": "unknown"}
                    for p in unknown
                ],
            )

        role = Role(data.role)
        if role is Role.TENANT_ADMIN and creator.role is not Role.TENANT_ADMIN:
            logger.warning("user_role_escalation_denied", creator_id=str(creator.user_id))
            raise AuthorizationError(
                "Only tenant admins can create tenant admins",
                error_code="role_escalation",
            )
        beyond = sorted(set(data.permissions) - creator.effective_permissions)
        if beyond:
            logger.warning(
                "user_permission_escalation_denied",
                creator_id=str(creator.user_id),
                permissions=beyond,
            )
            raise AuthorizationError(
                "Cannot grant permissions the creator does not hold",
                error_code="permission_escalation",
                details={"permissions": beyond},
            )

        tenant_id = creator.tenant_id
        if tenant_id is None:
            raise MissingTenantContextError()

        package = await self.packages.get_for_tenant(tenant_id)
        PackageLimits.from_package(package).ensure_within(
            "users", await self.repo.count_by_tenant(tenant_id)
        )

        if await self.repo.get_by_email(data.email, tenant_id):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": data.email},
            )

        user = await self.repo.create(
            User(
                tenant_id=tenant_id,
                email=data.email.lower(),
                full_name=data.full_name,
                password_hash=hash_password(data.password),
                role=role.value,
                permissions=sorted(set(data.permissions)) if role is Role.TENANT_USER else [],
            )
        )
        logger.info("user_created", user_id=str(user.id), tenant_id=str(tenant_id), role=role.value)
        return user


UserSvc = Annotated[UserService, Depends(UserService)]
