"""Pydantic schemas for subscription package operations."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from venuin.core.constants import MAX_SLUG_LENGTH


class PackageBase(BaseModel):
    """Fields shared by create and response schemas."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    features: list[str] = Field(default_factory=list)
    max_venues: int | None = Field(default=None, ge=-1)
    max_users: int | None = Field(default=None, ge=-1)
    price_monthly: Decimal = Field(default=Decimal("0"), ge=0)
    price_yearly: Decimal = Field(default=Decimal("0"), ge=0)
    billing_interval: Literal["monthly", "yearly"] = "monthly"
    is_active: bool = True


class PackageCreate(PackageBase):
    """Schema for creating a package."""

    slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH, pattern=r"^[a-z0-9-]+$")


class PackageUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    features: list[str] | None = None
    max_venues: int | None = Field(default=None, ge=-1)
    max_users: int | None = Field(default=None, ge=-1)
    price_monthly: Decimal | None = Field(default=None, ge=0)
    price_yearly: Decimal | None = Field(default=None, ge=0)
    billing_interval: Literal["monthly", "yearly"] | None = None
    is_active: bool | None = None


class PackageResponse(PackageBase):
    """Schema for package response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    created_at: datetime
