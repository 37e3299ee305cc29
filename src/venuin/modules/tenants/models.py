"""Tenant database models."""

from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venuin.core.database.base import Base, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from venuin.modules.packages.models import SubscriptionPackage


class TenantStatus(StrEnum):
    """Lifecycle state of a tenant."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class Tenant(Base, UUIDMixin, TimestampMixin):
    """Tenant model representing one venue business.

    All tenant-scoped data references this table via tenant_id and is
    removed with it (ON DELETE CASCADE). Admin audit entries are kept.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(
        String(63),
        nullable=False,
        unique=True,
        index=True,
    )
    status: Mapped[TenantStatus] = mapped_column(
        Enum(
            TenantStatus,
            name="tenant_status",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=TenantStatus.ACTIVE,
        nullable=False,
    )
    subscription_package_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("subscription_packages.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    subscription_package: Mapped["SubscriptionPackage | None"] = relationship(
        "SubscriptionPackage",
        lazy="selectin",
    )

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug={self.slug}, status={self.status})>"
