"""Async database session management."""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.exc import DisconnectionError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from venuin.config import settings


log = structlog.get_logger()


def context_probe_sql(
    tenant_setting: str = settings.tenant_setting_name,
    role_setting: str = settings.role_setting_name,
) -> str:
    """SQL reading the tenant and role session variables.

    Setting names are validated in Settings (``prefix.name`` made of
    alphanumerics and underscores), so inlining them is safe.
    """
    return (
        f"SELECT current_setting('{tenant_setting}', true), "
        f"current_setting('{role_setting}', true)"
    )


def install_connection_hygiene(
    engine: AsyncEngine,
    *,
    tenant_setting: str = settings.tenant_setting_name,
    role_setting: str = settings.role_setting_name,
) -> None:
    """Verify on every pool checkout that no tenant binding survived.

    Bindings are transaction-scoped, so a connection returned to the pool
    should read back empty values. If it does not, the connection is
    discarded (the pool then hands out a fresh one) instead of being reused.

    Args:
        engine: Engine whose pool is checked
        tenant_setting: Session variable holding the tenant id
        role_setting: Session variable holding the role
    """
    probe = context_probe_sql(tenant_setting, role_setting)

    @event.listens_for(engine.sync_engine, "checkout")
    def verify_clean_checkout(
        dbapi_connection: Any,
        connection_record: Any,
        connection_proxy: Any,
    ) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(probe)
            tenant, role = cursor.fetchone()
        finally:
            cursor.close()
        # The probe must not leave a transaction open behind the pool's back
        dbapi_connection.rollback()

        if tenant or role:
            log.warning(
                "stale_tenant_context_discarded",
                stale_tenant=tenant,
                stale_role=role,
            )
            raise DisconnectionError("Connection carried a tenant binding at checkout")


def build_engine(
    url: str,
    *,
    pool_size: int = settings.database_pool_size,
    max_overflow: int = settings.database_max_overflow,
    echo: bool = settings.database_echo,
    verify_context: bool = settings.verify_context_on_checkout,
    **kwargs: Any,
) -> AsyncEngine:
    """Create an async engine with the checkout hygiene hook installed.

    Args:
        url: Async database URL (``postgresql+asyncpg://``)
        pool_size: Pool size
        max_overflow: Pool overflow
        echo: Log SQL statements
        verify_context: Install the checkout verification hook
        **kwargs: Passed through to create_async_engine

    Returns:
        Configured AsyncEngine
    """
    engine = create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
        pool_pre_ping=True,
        **kwargs,
    )
    if verify_context:
        install_connection_hygiene(engine)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by the binder and the platform-level dependency."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_engine = build_engine(settings.async_database_url)

async_session_factory = build_session_factory(async_engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a session with no tenant bound.

    Suitable for platform tables (tenants, users, packages, audit). Every
    tenant-scoped table reads as empty through this session; use the
    context binder for tenant data.

    Usage:
        @router.get("/packages")
        async def list_packages(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
