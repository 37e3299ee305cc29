"""Customer database models."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.database.base import Base, TenantScopedMixin, TimestampMixin, UUIDMixin
from venuin.core.database.constraints import tenant_unique


class Customer(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
    """A customer of one tenant. The same email may exist in other tenants."""

    __tablename__ = "customers"
    __tenant_constraints__ = (tenant_unique("customers", "email"),)

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email={self.email}, tenant_id={self.tenant_id})>"
