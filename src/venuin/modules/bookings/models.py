"""Booking database models."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.database.base import Base, TenantScopedMixin, TimestampMixin, UUIDMixin
from venuin.core.database.constraints import tenant_foreign_key


class Booking(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
    """An event booked at a venue for a customer.

    Venue and customer are referenced through tenant-aware composite keys,
    so both must belong to the booking's tenant.
    """

    __tablename__ = "bookings"
    __tenant_constraints__ = (
        tenant_foreign_key("bookings", "venue_id", "venues"),
        tenant_foreign_key("bookings", "customer_id", "customers"),
        CheckConstraint("ends_at > starts_at", name="ends_after_start"),
    )

    venue_id: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    customer_id: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    event_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    starts_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    ends_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    guest_count: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default="pending",
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, venue_id={self.venue_id}, tenant_id={self.tenant_id})>"
