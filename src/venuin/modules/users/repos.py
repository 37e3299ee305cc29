"""User repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from venuin.api.dependencies import DBSession
from venuin.core.database.constraints import translate_integrity_error
from venuin.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    ``users`` is a platform table; lookups that concern a tenant always
    take the tenant id explicitly.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated

        Raises:
            ConflictError: If the email is already used in the tenant
        """
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str, tenant_id: UUID | None) -> User | None:
        """Get a user by email within a tenant, or among super admins when tenant_id is None.

        Args:
            email: The user's email
            tenant_id: The tenant to look in

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(func.lower(User.email) == email.lower())
        if tenant_id is None:
            stmt = stmt.where(User.tenant_id.is_(None))
        else:
            stmt = stmt.where(User.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_permissions(self, user_id: UUID) -> list[str]:
        """Stored permission list of a user (empty if unknown)."""
        result = await self.session.execute(select(User.permissions).where(User.id == user_id))
        return list(result.scalar_one_or_none() or [])

    async def count_by_tenant(self, tenant_id: UUID) -> int:
        """Number of users in a tenant."""
        stmt = select(func.count()).select_from(User).where(User.tenant_id == tenant_id)
        return (await self.session.execute(stmt)).scalar_one()

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users for a tenant with pagination.

        Args:
            tenant_id: The tenant's UUID
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (users list, total count)
        """
        total = await self.count_by_tenant(tenant_id)

        offset = (page - 1) * page_size
        stmt = (
            select(User)
            .where(User.tenant_id == tenant_id)
            .order_by(User.created_at.desc())
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        users = list(result.scalars().all())

        return users, total


# Type aliases for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
