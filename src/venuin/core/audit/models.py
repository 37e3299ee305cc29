"""Admin audit entry model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from venuin.core.constants import MAX_REQUEST_ID_LENGTH
from venuin.core.database.base import Base, UUIDMixin


class AdminAuditEntry(Base, UUIDMixin):
    """Record of a super admin entering a tenant.

    Append-only: the runtime role holds only SELECT and INSERT, and a
    trigger rejects UPDATE, DELETE and TRUNCATE. The ids are not foreign
    keys so that entries outlive the tenant and the operator account.

    Attributes:
        acting_super_admin_id: The super admin who elevated
        target_tenant_id: The tenant entered
        reason: Free-text justification supplied by the operator
        action: What was done (assume_tenant)
        ip_address: Client IP address
        user_agent: Client user agent
        request_id: Request correlation ID
        created_at: When the elevation started
    """

    __tablename__ = "admin_audit_entries"
    __table_args__ = (
        Index("ix_admin_audit_entries_target_created", "target_tenant_id", "created_at"),
    )

    acting_super_admin_id: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    target_tenant_id: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    reason: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    action: Mapped[str] = mapped_column(
        String(64),
        default="assume_tenant",
        nullable=False,
    )
    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
    )
    user_agent: Mapped[str | None] = mapped_column(
        String(512),
        nullable=True,
    )
    request_id: Mapped[str | None] = mapped_column(
        String(MAX_REQUEST_ID_LENGTH),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AdminAuditEntry(id={self.id}, acting_super_admin_id={self.acting_super_admin_id}, "
            f"target_tenant_id={self.target_tenant_id})>"
        )
