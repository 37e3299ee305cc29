"""Pydantic schemas for customer operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from venuin.core.constants import MAX_NAME_LENGTH


class CustomerCreate(BaseModel):
    """Schema for creating a customer."""

    full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)


class CustomerResponse(BaseModel):
    """Schema for customer response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    full_name: str
    email: str
    phone: str | None
    created_at: datetime
