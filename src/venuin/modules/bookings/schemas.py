"""Pydantic schemas for booking operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from venuin.core.constants import MAX_NAME_LENGTH


class BookingCreate(BaseModel):
    """Schema for booking a venue for a customer."""

    venue_id: UUID
    customer_id: UUID
    event_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    starts_at: datetime
    ends_at: datetime
    guest_count: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_period(self) -> "BookingCreate":
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class BookingResponse(BaseModel):
    """Schema for booking response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    venue_id: UUID
    customer_id: UUID
    event_name: str
    starts_at: datetime
    ends_at: datetime
    guest_count: int | None
    status: str
