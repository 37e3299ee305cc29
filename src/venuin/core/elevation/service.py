"""Super admin elevation ("assume tenant").

A super admin never sees tenant data through their own principal: they bind
no tenant, so every tenant-scoped table reads as empty. To act inside a
tenant they call ``assume_tenant`` with a reason. The service then, inside
one transaction and in this order:

1. writes an ``AdminAuditEntry`` and flushes it (work never starts if this
   fails),
2. binds the target tenant with the tenant_admin role through the context
   binder,
3. hands the bound session to the caller.

The elevation lives exactly as long as that transaction. There is no stored
"elevated" flag; the next request starts from the plain super admin
principal again. The audit row commits together with the work, so work that
rolls back leaves no audit row either.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from venuin.config import settings
from venuin.core.audit.models import AdminAuditEntry
from venuin.core.audit.service import AdminAuditSink, RequestMeta
from venuin.core.auth.principal import PermissionSet, Principal, Role
from venuin.core.database.context import TenantContextBinder
from venuin.core.errors import AuthorizationError, NotFoundError, ValidationError
from venuin.core.observability import get_tracer
from venuin.core.permissions.resolver import resolve_permissions
from venuin.modules.packages.models import SubscriptionPackage
from venuin.modules.tenants.models import Tenant


log = structlog.get_logger()
tracer = get_tracer(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ElevatedSession:
    """A transaction bound to the target tenant on behalf of a super admin.

    Attributes:
        session: The bound session
        tenant_id: The assumed tenant
        audit_entry: The entry written before binding
        principal: tenant_admin principal with ``elevated_by`` set
    """

    session: AsyncSession
    tenant_id: UUID
    audit_entry: AdminAuditEntry
    principal: Principal

    @property
    def permissions(self) -> PermissionSet:
        return self.principal.effective_permissions


class ElevationService:
    """Audited entry of a super admin into one tenant.

    Args:
        session_factory: Factory for sessions on the shared pool
        binder: Context binder (defaults to one on ``session_factory``)
        reason_min_length: Minimum stripped length of the reason
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        binder: TenantContextBinder | None = None,
        reason_min_length: int = settings.elevation_reason_min_length,
    ) -> None:
        self.session_factory = session_factory
        self.binder = binder or TenantContextBinder(session_factory)
        self.reason_min_length = reason_min_length

    def _validate(self, principal: Principal, reason: str | None) -> str:
        if principal.role is not Role.SUPER_ADMIN:
            log.warning(
                "elevation_denied",
                user_id=str(principal.user_id),
                role=principal.role.value,
            )
            raise AuthorizationError(
                "Only super admins can assume a tenant",
                error_code="not_super_admin",
            )
        reason = (reason or "").strip()
        if len(reason) < self.reason_min_length:
            raise ValidationError(
                f"Reason must be at least {self.reason_min_length} characters",
                error_code="elevation_reason_too_short",
                errors=[
                    {
                        "field": "reason",
                        "message": f"at least {self.reason_min_length} characters required",
                        "type": "too_short",
                    }
                ],
            )
        return reason

    async def _tenant_features(self, session: AsyncSession, tenant_id: UUID) -> list[str]:
        result = await session.execute(
            select(Tenant.id, SubscriptionPackage.features, SubscriptionPackage.is_active)
            .outerjoin(SubscriptionPackage, Tenant.subscription_package_id == SubscriptionPackage.id)
            .where(Tenant.id == tenant_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Tenant not found", resource="tenant", resource_id=str(tenant_id))
        _, features, is_active = row
        return list(features or []) if is_active else []

    @asynccontextmanager
    async def assume_tenant(
        self,
        principal: Principal,
        target_tenant_id: UUID,
        reason: str,
        *,
        request_meta: RequestMeta | None = None,
    ) -> AsyncIterator[ElevatedSession]:
        """Enter ``target_tenant_id`` as tenant_admin for one transaction.

        Args:
            principal: The super admin
            target_tenant_id: Tenant to enter
            reason: Justification recorded in the audit entry
            request_meta: Client information recorded with the entry

        Yields:
            ElevatedSession bound to the target tenant

        Raises:
            AuthorizationError: If the principal is not a super admin
            ValidationError: If the reason is too short
            NotFoundError: If the tenant does not exist
            AuditWriteFailure: If the audit entry cannot be written
        """
        reason = self._validate(principal, reason)
        written: list[AdminAuditEntry] = []
        features: list[str] = []

        async def audit_first(session: AsyncSession) -> None:
            features.extend(await self._tenant_features(session, target_tenant_id))
            entry = await AdminAuditSink(session).record(
                acting_super_admin_id=principal.user_id,
                target_tenant_id=target_tenant_id,
                reason=reason,
                action="assume_tenant",
                meta=request_meta,
            )
            written.append(entry)

        with tracer.start_as_current_span("elevation.assume_tenant") as span:
            span.set_attribute("elevation.super_admin_id", str(principal.user_id))
            span.set_attribute("elevation.tenant_id", str(target_tenant_id))

            async with self.binder.transaction(
                target_tenant_id,
                Role.TENANT_ADMIN,
                before_bind=audit_first,
            ) as session:
                elevated = Principal(
                    user_id=principal.user_id,
                    tenant_id=target_tenant_id,
                    role=Role.TENANT_ADMIN,
                    elevated_by=principal.user_id,
                )
                elevated = elevated.with_permissions(resolve_permissions(elevated, features))
                log.info(
                    "tenant_assumed",
                    super_admin_id=str(principal.user_id),
                    tenant_id=str(target_tenant_id),
                    audit_entry_id=str(written[0].id),
                )
                yield ElevatedSession(
                    session=session,
                    tenant_id=target_tenant_id,
                    audit_entry=written[0],
                    principal=elevated,
                )

    async def run(
        self,
        principal: Principal,
        target_tenant_id: UUID,
        reason: str,
        work: Callable[[ElevatedSession], Awaitable[T]],
        *,
        request_meta: RequestMeta | None = None,
    ) -> T:
        """Run ``work`` inside an elevation and return its result."""
        async with self.assume_tenant(
            principal,
            target_tenant_id,
            reason,
            request_meta=request_meta,
        ) as elevated:
            return await work(elevated)

    async def list_entries(
        self,
        target_tenant_id: UUID | None = None,
        limit: int = 50,
    ) -> list[AdminAuditEntry]:
        """Audit entries, most recent first."""
        async with self.session_factory() as session:
            return await AdminAuditSink(session).list_entries(target_tenant_id, limit=limit)
