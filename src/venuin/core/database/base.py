"""SQLAlchemy declarative base and common mixins."""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, MetaData, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


# Deterministic constraint names; the constraint layer relies on the
# uq_/fk_ prefixes to classify integrity errors.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDMixin:
    """Mixin that adds a UUID primary key."""

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        index=True,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TenantScopedMixin:
    """Mixin for rows owned by exactly one tenant.

    Every model using this mixin gets a non-null ``tenant_id`` foreign key,
    is registered with the isolation policy set (forced row-level security),
    and exposes a ``(id, tenant_id)`` unique key so that children can
    reference it with a tenant-aware composite foreign key.

    Models add their own constraints through ``__tenant_constraints__``
    (see ``venuin.core.database.constraints``); ``__table_args__`` is built
    from it.

    Example:
        class Venue(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
            __tablename__ = "venues"
            __tenant_constraints__ = (tenant_unique("venues", "slug"),)
    """

    __tenant_scoped__: ClassVar[bool] = True
    __tenant_constraints__: ClassVar[tuple[Any, ...]] = ()

    tenant_id: Mapped[UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (
            UniqueConstraint("id", "tenant_id", name=f"uq_{cls.__tablename__}_id_tenant"),
            *cls.__tenant_constraints__,
        )


def tenant_scoped_tables() -> list[str]:
    """Names of all tables mapped by TenantScopedMixin models, sorted."""
    names = {
        mapper.local_table.name
        for mapper in Base.registry.mappers
        if getattr(mapper.class_, "__tenant_scoped__", False)
    }
    return sorted(names)
