"""Venue database models."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.database.base import Base, TenantScopedMixin, TimestampMixin, UUIDMixin
from venuin.core.database.constraints import tenant_unique


class Venue(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
    """A bookable venue owned by one tenant."""

    __tablename__ = "venues"
    __tenant_constraints__ = (tenant_unique("venues", "slug"),)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(63),
        nullable=False,
    )
    capacity: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, slug={self.slug}, tenant_id={self.tenant_id})>"
