"""Database layer - sessions, tenant context binding, isolation policies and constraints."""

from venuin.core.database.base import (
    Base,
    TenantScopedMixin,
    TimestampMixin,
    UUIDMixin,
    tenant_scoped_tables,
)
from venuin.core.database.constraints import (
    tenant_foreign_key,
    tenant_unique,
    translate_database_error,
    translate_integrity_error,
)
from venuin.core.database.context import (
    BoundContext,
    SessionContextState,
    TenantContextBinder,
    bound_context,
    read_bound_context,
    with_tenant_context,
)
from venuin.core.database.policies import (
    IsolationReport,
    apply_isolation,
    isolation_ddl,
    verify_isolation,
)
from venuin.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    build_session_factory,
    get_db,
    install_connection_hygiene,
)


__all__ = [
    "Base",
    "BoundContext",
    "IsolationReport",
    "SessionContextState",
    "TenantContextBinder",
    "TenantScopedMixin",
    "TimestampMixin",
    "UUIDMixin",
    "apply_isolation",
    "async_engine",
    "async_session_factory",
    "bound_context",
    "build_engine",
    "build_session_factory",
    "get_db",
    "install_connection_hygiene",
    "isolation_ddl",
    "read_bound_context",
    "tenant_foreign_key",
    "tenant_scoped_tables",
    "tenant_unique",
    "translate_database_error",
    "translate_integrity_error",
    "verify_isolation",
    "with_tenant_context",
]
