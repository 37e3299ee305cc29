"""Pydantic schemas for venue operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from venuin.core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH


class VenueCreate(BaseModel):
    """Schema for creating a venue in the caller's tenant."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH, pattern=r"^[a-z0-9-]+$")
    capacity: int | None = Field(default=None, ge=0)
    address: str | None = None


class VenueResponse(BaseModel):
    """Schema for venue response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    name: str
    slug: str
    capacity: int | None
    address: str | None
    is_active: bool
    created_at: datetime
