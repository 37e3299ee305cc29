"""User database models."""

from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.auth.principal import Role
from venuin.core.constants import MAX_PERMISSION_LENGTH, MAX_ROLE_NAME_LENGTH
from venuin.core.database.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """User model representing an account that can authenticate.

    Tenant users and tenant admins belong to exactly one tenant. Super admins
    belong to none; the check constraint keeps the two in step.

    Attributes:
        tenant_id: Owning tenant (NULL only for super_admin)
        email: Unique within the tenant (among super admins when NULL)
        password_hash: Bcrypt hash
        full_name: Display name
        role: tenant_user, tenant_admin or super_admin
        permissions: Permissions granted by the tenant admin; only
            meaningful for tenant_user and always intersected with the
            tenant's package
        is_active: Whether the user can log in
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        CheckConstraint(
            f"(role = '{Role.SUPER_ADMIN.value}') = (tenant_id IS NULL)",
            name="super_admin_has_no_tenant",
        ),
        Index(
            "uq_users_platform_email",
            "email",
            unique=True,
            postgresql_where="tenant_id IS NULL",
        ),
    )

    tenant_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        default=Role.TENANT_USER.value,
        nullable=False,
    )
    permissions: Mapped[list[str]] = mapped_column(
        ARRAY(String(MAX_PERMISSION_LENGTH)),
        default=list,
        server_default="{}",
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, tenant_id={self.tenant_id})>"
