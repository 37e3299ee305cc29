"""Subscription package models."""

from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.constants import UNLIMITED
from venuin.core.database.base import Base, TimestampMixin, UUIDMixin


class SubscriptionPackage(Base, UUIDMixin, TimestampMixin):
    """A named bundle of features and usage limits assigned to tenants.

    Attributes:
        name: Display name (Starter, Professional, ...)
        slug: Unique identifier used by provisioning scripts
        features: Ordered feature identifiers unlocked by the package
        max_venues: Venue limit, -1 or NULL for unlimited
        max_users: User limit, -1 or NULL for unlimited
        price_monthly: Monthly price
        price_yearly: Yearly price
        billing_interval: Default billing interval (monthly or yearly)
        is_active: Whether the package can be assigned to tenants
    """

    __tablename__ = "subscription_packages"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(63),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    features: Mapped[list[str]] = mapped_column(
        ARRAY(String(64)),
        default=list,
        server_default="{}",
        nullable=False,
    )
    max_venues: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    max_users: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    price_monthly: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("0"),
        nullable=False,
    )
    price_yearly: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("0"),
        nullable=False,
    )
    billing_interval: Mapped[str] = mapped_column(
        String(20),
        default="monthly",
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def has_feature(self, feature: str) -> bool:
        return feature in (self.features or [])

    def limit_for(self, resource: str) -> int:
        """Usage limit for ``venues`` or ``users``; -1 means unlimited."""
        value = getattr(self, f"max_{resource}")
        return UNLIMITED if value is None else value

    def __repr__(self) -> str:
        return f"<SubscriptionPackage(id={self.id}, slug={self.slug})>"
