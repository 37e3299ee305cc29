"""Tenant context binding.

The binder is the only code that writes the tenant and role session
variables. It opens one transaction, sets both variables with
``set_config(name, value, true)`` (transaction-scoped, so they vanish at
COMMIT or ROLLBACK and never leak to the next user of the pooled
connection), runs the caller's work and ends the transaction.

Row-level security policies read the tenant variable through
``venuin_current_tenant()``; nothing else in the application carries the
tenant to the database. There is no process-global or context-var tenant
state: the binding lives in the transaction and is recorded on
``session.info`` only to detect double binding.

Usage:
    binder = TenantContextBinder(async_session_factory)

    async with binder.transaction(principal.tenant_id, principal.role) as session:
        venues = (await session.scalars(select(Venue))).all()
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import NamedTuple, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from venuin.config import settings
from venuin.core.auth.principal import Role
from venuin.core.database.constraints import translate_database_error
from venuin.core.database.session import async_session_factory, context_probe_sql
from venuin.core.errors import (
    AuthorizationError,
    MissingTenantContextError,
    TenantContextAlreadyBoundError,
)
from venuin.core.observability import get_tracer


log = structlog.get_logger()
tracer = get_tracer(__name__)

T = TypeVar("T")

# Key on AsyncSession.info marking the active binding
BOUND_CONTEXT_KEY = "venuin.bound_context"


class BoundContext(NamedTuple):
    """The tenant and role bound to the current transaction."""

    tenant_id: UUID
    role: Role


class SessionContextState(NamedTuple):
    """Raw values of the session variables as the database sees them."""

    tenant: str | None
    role: str | None

    @property
    def is_clean(self) -> bool:
        return not self.tenant and not self.role


def _check_binding(tenant_id: UUID | None, role: Role | str) -> Role:
    if tenant_id is None:
        raise MissingTenantContextError()
    role = Role(role)
    if role is Role.SUPER_ADMIN:
        # Operators only enter a tenant through the elevation service
        raise AuthorizationError(
            "super_admin cannot be bound to a tenant directly",
            error_code="elevation_required",
        )
    return role


class TenantContextBinder:
    """Binds a tenant and role to exactly one database transaction.

    Args:
        session_factory: Factory producing sessions on the shared pool
        tenant_setting: Session variable read by the isolation policies
        role_setting: Session variable carrying the bound role
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        tenant_setting: str = settings.tenant_setting_name,
        role_setting: str = settings.role_setting_name,
    ) -> None:
        self.session_factory = session_factory
        self.tenant_setting = tenant_setting
        self.role_setting = role_setting

    async def bind(
        self,
        session: AsyncSession,
        tenant_id: UUID | None,
        role: Role | str,
    ) -> BoundContext:
        """Bind tenant and role to the session's current transaction.

        Args:
            session: Session whose transaction receives the binding
            tenant_id: Tenant to bind
            role: Role to bind (tenant_user or tenant_admin)

        Returns:
            The bound context

        Raises:
            MissingTenantContextError: If tenant_id is None
            AuthorizationError: If role is super_admin
            TenantContextAlreadyBoundError: If the transaction is already bound
        """
        role = _check_binding(tenant_id, role)
        assert tenant_id is not None

        if BOUND_CONTEXT_KEY in session.info:
            raise TenantContextAlreadyBoundError(
                details={"bound_tenant_id": str(session.info[BOUND_CONTEXT_KEY].tenant_id)}
            )

        await session.execute(
            text("SELECT set_config(:tenant_setting, :tenant_id, true), set_config(:role_setting, :role, true)"),
            {
                "tenant_setting": self.tenant_setting,
                "tenant_id": str(tenant_id),
                "role_setting": self.role_setting,
                "role": role.value,
            },
        )
        context = BoundContext(tenant_id=tenant_id, role=role)
        session.info[BOUND_CONTEXT_KEY] = context

        log.debug("tenant_context_bound", tenant_id=str(tenant_id), role=role.value)
        return context

    @asynccontextmanager
    async def transaction(
        self,
        tenant_id: UUID | None,
        role: Role | str,
        *,
        before_bind: Callable[[AsyncSession], Awaitable[object]] | None = None,
    ) -> AsyncIterator[AsyncSession]:
        """Open a session and a transaction bound to one tenant.

        Commits when the block exits normally and rolls back on any
        exception, cancellation included. Integrity and row-level security
        violations are translated by the constraint layer.

        Args:
            tenant_id: Tenant to bind
            role: Role to bind
            before_bind: Awaited inside the transaction before the variables
                are set (the elevation service writes its audit entry here)

        Yields:
            The bound AsyncSession
        """
        role = _check_binding(tenant_id, role)

        with tracer.start_as_current_span("tenant_context.transaction") as span:
            span.set_attribute("tenant.id", str(tenant_id))
            span.set_attribute("tenant.role", role.value)

            async with self.session_factory() as session:
                try:
                    async with session.begin():
                        if before_bind is not None:
                            await before_bind(session)
                        await self.bind(session, tenant_id, role)
                        yield session
                except DBAPIError as exc:
                    translated = translate_database_error(exc)
                    if translated is None:
                        raise
                    log.info(
                        "tenant_write_rejected",
                        tenant_id=str(tenant_id),
                        error_code=translated.error_code,
                        constraint=translated.details.get("constraint"),
                    )
                    raise translated from exc
                finally:
                    session.info.pop(BOUND_CONTEXT_KEY, None)

    async def run(
        self,
        tenant_id: UUID | None,
        role: Role | str,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Run ``work`` inside a bound transaction and return its result."""
        async with self.transaction(tenant_id, role) as session:
            return await work(session)


async def with_tenant_context(
    tenant_id: UUID | None,
    role: Role | str,
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> T:
    """Run ``work`` in a transaction bound to ``tenant_id`` and ``role``.

    Example:
        async def list_venues(session: AsyncSession) -> list[Venue]:
            return list((await session.scalars(select(Venue))).all())

        venues = await with_tenant_context(tenant_id, Role.TENANT_ADMIN, list_venues)
    """
    binder = TenantContextBinder(session_factory or async_session_factory)
    return await binder.run(tenant_id, role, work)


def bound_context(session: AsyncSession) -> BoundContext | None:
    """The binding recorded on a session by the binder, if any."""
    return session.info.get(BOUND_CONTEXT_KEY)


async def read_bound_context(session: AsyncSession) -> SessionContextState:
    """Read the session variables back from the database.

    An empty string and NULL both mean "not set".
    """
    result = await session.execute(text(context_probe_sql()))
    tenant, role = result.one()
    return SessionContextState(tenant=tenant or None, role=role or None)
