"""Request-scoped identity types.

A ``Principal`` is built fresh for every request from a verified credential
and is never persisted or cached. Role is a tag consulted by the permission
resolver; there are no per-role subclasses.
"""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator


class Role(StrEnum):
    """The three roles known to the platform."""

    TENANT_USER = "tenant_user"
    TENANT_ADMIN = "tenant_admin"
    SUPER_ADMIN = "super_admin"

    @property
    def is_tenant_role(self) -> bool:
        """Whether principals with this role always belong to a tenant."""
        return self is not Role.SUPER_ADMIN


PermissionSet = frozenset[str]


class Principal(BaseModel):
    """The resolved identity bound to one request.

    Attributes:
        user_id: The authenticated user
        tenant_id: The tenant the principal acts in (None for super_admin
            outside an elevation)
        role: The role used for permission resolution
        effective_permissions: Filled in by the permission resolver
        elevated_by: Set when a super_admin acts inside a tenant through
            the elevation service
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    tenant_id: UUID | None
    role: Role
    effective_permissions: PermissionSet = frozenset()
    elevated_by: UUID | None = None

    @model_validator(mode="after")
    def check_tenant_binding(self) -> "Principal":
        """Tenant roles need a tenant; super_admin never carries one."""
        if self.role.is_tenant_role and self.tenant_id is None:
            raise ValueError(f"{self.role} principal requires a tenant_id")
        if self.role is Role.SUPER_ADMIN and self.tenant_id is not None:
            raise ValueError("super_admin principal cannot carry a tenant_id")
        return self

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    @property
    def is_elevated(self) -> bool:
        return self.elevated_by is not None

    def with_permissions(self, permissions: PermissionSet) -> "Principal":
        """Return a copy carrying the resolved permission set."""
        return self.model_copy(update={"effective_permissions": frozenset(permissions)})
