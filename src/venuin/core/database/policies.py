"""Row-level security policy set.

Generates the DDL that makes the database refuse cross-tenant rows, and
verifies that the live database is actually in that state.

For every tenant-scoped table:

    ALTER TABLE <t> ENABLE ROW LEVEL SECURITY;
    ALTER TABLE <t> FORCE ROW LEVEL SECURITY;
    CREATE POLICY tenant_isolation ON <t> FOR ALL
        USING (tenant_id = venuin_current_tenant())
        WITH CHECK (tenant_id = venuin_current_tenant());

``venuin_current_tenant()`` returns NULL when the session variable is unset
or empty. ``tenant_id = NULL`` is never true, so an unbound transaction sees
no tenant rows and cannot write any.

The runtime role cannot bypass these policies. The maintenance role
(BYPASSRLS) is the only override and is reserved for migrations and
provisioning.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from venuin.config import settings
from venuin.core.database.base import tenant_scoped_tables
from venuin.core.errors import IsolationMisconfiguredError


log = structlog.get_logger()

POLICY_NAME = "tenant_isolation"
CURRENT_TENANT_FUNCTION = "venuin_current_tenant"
AUDIT_TABLE = "admin_audit_entries"
AUDIT_TRIGGER = "venuin_audit_append_only"

# Platform tables the runtime role may read and write. users carries a
# nullable tenant_id (super admins have none) and is filtered in queries.
PLATFORM_TABLES = ("tenants", "subscription_packages", "users")


def current_tenant_function_ddl(tenant_setting: str = settings.tenant_setting_name) -> str:
    return (
        f"CREATE OR REPLACE FUNCTION {CURRENT_TENANT_FUNCTION}() RETURNS uuid "
        "LANGUAGE sql STABLE AS "
        f"$$ SELECT NULLIF(current_setting('{tenant_setting}', true), '')::uuid $$"
    )


def table_policy_ddl(table: str) -> list[str]:
    """Statements enabling forced RLS and the isolation policy on one table."""
    predicate = f"tenant_id = {CURRENT_TENANT_FUNCTION}()"
    return [
        f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY",
        f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY",
        f"DROP POLICY IF EXISTS {POLICY_NAME} ON {table}",
        f"CREATE POLICY {POLICY_NAME} ON {table} AS PERMISSIVE FOR ALL "
        f"USING ({predicate}) WITH CHECK ({predicate})",
    ]


def drop_table_policy_ddl(table: str) -> list[str]:
    return [
        f"DROP POLICY IF EXISTS {POLICY_NAME} ON {table}",
        f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY",
        f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY",
    ]


def _create_role_ddl(role: str, attributes: str) -> list[str]:
    return [
        "DO $$ BEGIN "
        f"IF NOT EXISTS (SELECT 1 FROM pg_roles WHERE rolname = '{role}') THEN "
        f"CREATE ROLE {role} LOGIN; "
        "END IF; END $$",
        f"ALTER ROLE {role} {attributes}",
    ]


def roles_ddl(
    app_role: str = settings.app_db_role,
    maintenance_role: str = settings.maintenance_db_role,
) -> list[str]:
    """Create the runtime and maintenance roles.

    Requires a superuser (BYPASSRLS can only be granted by one).
    Passwords are managed outside migrations.
    """
    return [
        *_create_role_ddl(app_role, "NOSUPERUSER NOBYPASSRLS NOCREATEROLE NOCREATEDB"),
        *_create_role_ddl(maintenance_role, "NOSUPERUSER BYPASSRLS"),
    ]


def grants_ddl(
    tenant_tables: Sequence[str],
    app_role: str = settings.app_db_role,
    maintenance_role: str = settings.maintenance_db_role,
) -> list[str]:
    """Privileges for both roles. The audit table is insert/select only."""
    statements = [
        f"GRANT USAGE ON SCHEMA public TO {app_role}, {maintenance_role}",
        f"GRANT EXECUTE ON FUNCTION {CURRENT_TENANT_FUNCTION}() TO {app_role}",
    ]
    dml_tables = ", ".join([*PLATFORM_TABLES, *tenant_tables])
    statements.append(f"GRANT SELECT, INSERT, UPDATE, DELETE ON {dml_tables} TO {app_role}")
    statements.append(f"REVOKE UPDATE, DELETE, TRUNCATE ON {AUDIT_TABLE} FROM {app_role}")
    statements.append(f"GRANT SELECT, INSERT ON {AUDIT_TABLE} TO {app_role}")
    statements.append(f"GRANT ALL ON ALL TABLES IN SCHEMA public TO {maintenance_role}")
    return statements


def audit_append_only_ddl() -> list[str]:
    """Trigger rejecting UPDATE, DELETE and TRUNCATE on the audit table."""
    return [
        f"CREATE OR REPLACE FUNCTION {AUDIT_TRIGGER}() RETURNS trigger "
        "LANGUAGE plpgsql AS $$ BEGIN "
        f"RAISE EXCEPTION '{AUDIT_TABLE} is append-only' "
        "USING ERRCODE = 'insufficient_privilege'; "
        "END $$",
        f"DROP TRIGGER IF EXISTS {AUDIT_TRIGGER} ON {AUDIT_TABLE}",
        f"CREATE TRIGGER {AUDIT_TRIGGER} BEFORE UPDATE OR DELETE ON {AUDIT_TABLE} "
        f"FOR EACH ROW EXECUTE FUNCTION {AUDIT_TRIGGER}()",
        f"DROP TRIGGER IF EXISTS {AUDIT_TRIGGER}_truncate ON {AUDIT_TABLE}",
        f"CREATE TRIGGER {AUDIT_TRIGGER}_truncate BEFORE TRUNCATE ON {AUDIT_TABLE} "
        f"FOR EACH STATEMENT EXECUTE FUNCTION {AUDIT_TRIGGER}()",
    ]


def isolation_ddl(
    tables: Sequence[str] | None = None,
    *,
    include_roles: bool = True,
) -> list[str]:
    """The complete, idempotent statement list for the isolation policy set.

    Args:
        tables: Tenant-scoped tables (defaults to every mapped one)
        include_roles: Also create the roles and grant privileges

    Returns:
        SQL statements in execution order
    """
    tables = list(tables) if tables is not None else tenant_scoped_tables()
    statements = [current_tenant_function_ddl()]
    for table in tables:
        statements.extend(table_policy_ddl(table))
    statements.extend(audit_append_only_ddl())
    if include_roles:
        statements.extend(roles_ddl())
        statements.extend(grants_ddl(tables))
    return statements


async def apply_isolation(
    connection: AsyncConnection,
    tables: Sequence[str] | None = None,
    *,
    include_roles: bool = True,
) -> None:
    """Execute the isolation DDL on a maintenance connection."""
    statements = isolation_ddl(tables, include_roles=include_roles)
    for statement in statements:
        await connection.execute(text(statement))
    log.info("isolation_policies_applied", statements=len(statements))


@dataclass
class TableIsolation:
    """RLS state of one tenant-scoped table."""

    table: str
    exists: bool = False
    rls_enabled: bool = False
    rls_forced: bool = False
    has_policy: bool = False

    @property
    def ok(self) -> bool:
        return self.exists and self.rls_enabled and self.rls_forced and self.has_policy


@dataclass
class IsolationReport:
    """Result of ``verify_isolation``."""

    tables: list[TableIsolation] = field(default_factory=list)
    current_user: str | None = None
    current_user_bypasses_rls: bool = False
    runtime_role: str = settings.app_db_role
    runtime_role_bypasses_rls: bool | None = None
    current_tenant_function: bool = False
    audit_trigger: bool = False
    unregistered_tables: list[str] = field(default_factory=list)

    @property
    def problems(self) -> list[str]:
        problems: list[str] = []
        for state in self.tables:
            if not state.exists:
                problems.append(f"{state.table}: table missing")
                continue
            if not state.rls_enabled:
                problems.append(f"{state.table}: row level security disabled")
            if not state.rls_forced:
                problems.append(f"{state.table}: row level security not forced")
            if not state.has_policy:
                problems.append(f"{state.table}: {POLICY_NAME} policy missing")
        for table in self.unregistered_tables:
            problems.append(f"{table}: has tenant_id but is not protected")
        if self.runtime_role_bypasses_rls is None:
            problems.append(f"role {self.runtime_role} missing")
        elif self.runtime_role_bypasses_rls:
            problems.append(f"role {self.runtime_role} can bypass row level security")
        if not self.current_tenant_function:
            problems.append(f"function {CURRENT_TENANT_FUNCTION}() missing")
        if not self.audit_trigger:
            problems.append(f"{AUDIT_TABLE}: append-only trigger missing")
        return problems

    @property
    def ok(self) -> bool:
        return not self.problems

    def raise_for_problems(self) -> None:
        """Raise IsolationMisconfiguredError if anything is wrong."""
        problems = self.problems
        if problems:
            raise IsolationMisconfiguredError(details={"problems": problems})

    def as_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "problems": self.problems,
            "current_user": self.current_user,
            "current_user_bypasses_rls": self.current_user_bypasses_rls,
            "tables": {
                state.table: {
                    "rls_enabled": state.rls_enabled,
                    "rls_forced": state.rls_forced,
                    "has_policy": state.has_policy,
                }
                for state in self.tables
            },
        }


async def verify_isolation(
    connection: AsyncConnection | AsyncSession,
    tables: Iterable[str] | None = None,
    *,
    runtime_role: str = settings.app_db_role,
) -> IsolationReport:
    """Inspect the catalog and report the isolation state.

    Checks that every tenant-scoped table has RLS enabled and forced with
    the isolation policy present, that no other table with a ``tenant_id``
    column escaped registration, that the runtime role cannot bypass RLS,
    and that the policy function and audit trigger exist.

    ``current_user_bypasses_rls`` is informational: maintenance connections
    are expected to bypass.
    """
    names = sorted(tables) if tables is not None else tenant_scoped_tables()
    report = IsolationReport(
        tables=[TableIsolation(table=name) for name in names],
        runtime_role=runtime_role,
    )
    by_name = {state.table: state for state in report.tables}

    if names:
        rows = await connection.execute(
            text(
                "SELECT c.relname, c.relrowsecurity, c.relforcerowsecurity "
                "FROM pg_class c JOIN pg_namespace n ON n.oid = c.relnamespace "
                "WHERE n.nspname = current_schema() AND c.relkind = 'r' "
                "AND c.relname IN :names"
            ).bindparams(bindparam("names", expanding=True)),
            {"names": names},
        )
        for relname, enabled, forced in rows:
            state = by_name[relname]
            state.exists = True
            state.rls_enabled = bool(enabled)
            state.rls_forced = bool(forced)

        rows = await connection.execute(
            text(
                "SELECT tablename FROM pg_policies "
                "WHERE schemaname = current_schema() AND policyname = :policy "
                "AND tablename IN :names"
            ).bindparams(bindparam("names", expanding=True)),
            {"policy": POLICY_NAME, "names": names},
        )
        for (tablename,) in rows:
            by_name[tablename].has_policy = True

    rows = await connection.execute(
        text(
            "SELECT DISTINCT table_name FROM information_schema.columns "
            "WHERE table_schema = current_schema() AND column_name = 'tenant_id'"
        )
    )
    exempt = {*PLATFORM_TABLES, *names}
    report.unregistered_tables = sorted(name for (name,) in rows if name not in exempt)

    row = (
        await connection.execute(
            text(
                "SELECT current_user, rolsuper OR rolbypassrls FROM pg_roles "
                "WHERE rolname = current_user"
            )
        )
    ).one()
    report.current_user, report.current_user_bypasses_rls = row[0], bool(row[1])

    bypass = (
        await connection.execute(
            text("SELECT rolsuper OR rolbypassrls FROM pg_roles WHERE rolname = :role"),
            {"role": runtime_role},
        )
    ).scalar_one_or_none()
    report.runtime_role_bypasses_rls = None if bypass is None else bool(bypass)

    report.current_tenant_function = bool(
        (
            await connection.execute(
                text("SELECT to_regprocedure(:signature) IS NOT NULL"),
                {"signature": f"{CURRENT_TENANT_FUNCTION}()"},
            )
        ).scalar_one()
    )
    report.audit_trigger = bool(
        (
            await connection.execute(
                text("SELECT count(*) FROM pg_trigger WHERE tgname = :name AND NOT tgisinternal"),
                {"name": AUDIT_TRIGGER},
            )
        ).scalar_one()
    )

    if not report.ok:
        log.warning("isolation_verification_failed", problems=report.problems)
    return report
