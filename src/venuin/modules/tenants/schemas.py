"""Pydantic schemas for tenant and super admin operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from venuin.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_REASON_LENGTH,
    MAX_SLUG_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from venuin.modules.tenants.models import TenantStatus
from venuin.modules.users.schemas import validate_password_complexity
from venuin.modules.venues.schemas import VenueResponse


class TenantCreate(BaseModel):
    """Provision a tenant together with its first tenant admin."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH, pattern=r"^[a-z0-9-]+$")
    subscription_package_id: UUID | None = None
    admin_email: EmailStr
    admin_full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    admin_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("admin_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class TenantUpdate(BaseModel):
    """Change a tenant's status or package."""

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    status: TenantStatus | None = None
    subscription_package_id: UUID | None = None


class TenantResponse(BaseModel):
    """Schema for tenant response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    status: TenantStatus
    subscription_package_id: UUID | None
    created_at: datetime


class TenantListResponse(BaseModel):
    """Paginated tenant list."""

    items: list[TenantResponse]
    total: int
    page: int
    page_size: int


class AssumeTenantRequest(BaseModel):
    """Reason recorded in the admin audit trail."""

    reason: str = Field(..., max_length=MAX_REASON_LENGTH)


class AssumeTenantResponse(BaseModel):
    """What a super admin saw while elevated into a tenant."""

    tenant_id: UUID
    audit_entry_id: UUID
    permissions: list[str]
    venues: list[VenueResponse]


class AuditEntryResponse(BaseModel):
    """Schema for admin audit entries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    acting_super_admin_id: UUID
    target_tenant_id: UUID
    reason: str
    action: str
    ip_address: str | None
    user_agent: str | None
    request_id: str | None
    created_at: datetime
