"""Admin audit sink.

Writes and reads ``admin_audit_entries``. Entries are only ever inserted;
the table rejects updates and deletes at the database level.
"""

from dataclasses import dataclass
from uuid import UUID

import structlog
from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.audit.models import AdminAuditEntry
from venuin.core.constants import DEFAULT_PAGE_SIZE, MAX_USER_AGENT_LENGTH
from venuin.core.errors import AuditWriteFailure
from venuin.core.logging import get_client_ip


log = structlog.get_logger()


@dataclass(frozen=True)
class RequestMeta:
    """Request information recorded with an audit entry.

    Attributes:
        ip_address: Client IP address
        user_agent: Client user agent
        request_id: Request correlation ID
    """

    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestMeta":
        user_agent = request.headers.get("User-Agent")
        return cls(
            ip_address=get_client_ip(request),
            user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
            request_id=getattr(request.state, "request_id", None),
        )


class AdminAuditSink:
    """Append-only store for super admin actions.

    Args:
        session: Session whose transaction the entry joins
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        acting_super_admin_id: UUID,
        target_tenant_id: UUID,
        reason: str,
        action: str = "assume_tenant",
        meta: RequestMeta | None = None,
    ) -> AdminAuditEntry:
        """Insert an entry and flush it.

        Returns:
            The persisted entry

        Raises:
            AuditWriteFailure: If the database refuses the write
        """
        meta = meta or RequestMeta()
        entry = AdminAuditEntry(
            acting_super_admin_id=acting_super_admin_id,
            target_tenant_id=target_tenant_id,
            reason=reason,
            action=action,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            request_id=meta.request_id,
        )

        try:
            self.session.add(entry)
            await self.session.flush()
        except SQLAlchemyError as exc:
            log.error(
                "admin_audit_write_failed",
                acting_super_admin_id=str(acting_super_admin_id),
                target_tenant_id=str(target_tenant_id),
                action=action,
                error=str(exc),
            )
            raise AuditWriteFailure() from exc

        log.info(
            "admin_audit_entry_created",
            audit_entry_id=str(entry.id),
            acting_super_admin_id=str(acting_super_admin_id),
            target_tenant_id=str(target_tenant_id),
            action=action,
        )
        return entry

    async def list_entries(
        self,
        target_tenant_id: UUID | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[AdminAuditEntry]:
        """Most recent entries first, optionally for one tenant."""
        stmt = select(AdminAuditEntry).order_by(AdminAuditEntry.created_at.desc()).limit(limit)
        if target_tenant_id is not None:
            stmt = stmt.where(AdminAuditEntry.target_tenant_id == target_tenant_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
