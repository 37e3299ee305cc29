"""Tenant-aware schema constraints.

These hold even if the context binder or the row-level security policies
were misconfigured:

- natural keys are unique per ``(tenant_id, key)``, never globally;
- a child row's ``tenant_id`` must equal the ``tenant_id`` of every parent it
  references. Foreign key checks in PostgreSQL are not subject to row-level
  security, so a plain ``venue_id`` FK would happily accept another tenant's
  venue. The composite FK on ``(venue_id, tenant_id)`` cannot.
"""

import re
from typing import Any

from sqlalchemy import ForeignKeyConstraint, UniqueConstraint
from sqlalchemy.exc import DBAPIError, IntegrityError

from venuin.core.errors import AppException, ConflictError, CrossTenantConstraintViolation


UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"

_CONSTRAINT_IN_MESSAGE = re.compile(r'constraint "([^"]+)"')


def tenant_unique(table: str, *columns: str) -> UniqueConstraint:
    """Unique constraint on ``(tenant_id, *columns)``.

    Args:
        table: Table name, used for the constraint name
        columns: Natural key columns

    Returns:
        A UniqueConstraint named ``uq_<table>_tenant_<columns>``
    """
    if not columns:
        raise ValueError("tenant_unique needs at least one column")
    return UniqueConstraint(
        "tenant_id",
        *columns,
        name=f"uq_{table}_tenant_{'_'.join(columns)}",
    )


def tenant_foreign_key(
    table: str,
    column: str,
    parent_table: str,
    ondelete: str = "RESTRICT",
) -> ForeignKeyConstraint:
    """Composite foreign key ``(column, tenant_id) -> parent(id, tenant_id)``.

    The parent must be tenant scoped (it then carries the
    ``uq_<parent>_id_tenant`` key this constraint references).

    Args:
        table: Child table name
        column: Child column holding the parent id
        parent_table: Referenced tenant-scoped table
        ondelete: RESTRICT or CASCADE; SET NULL would also null tenant_id

    Returns:
        A ForeignKeyConstraint named ``fk_<table>_<column>_tenant``
    """
    if ondelete.upper() not in {"RESTRICT", "CASCADE", "NO ACTION"}:
        raise ValueError(f"Unsupported ondelete for a tenant foreign key: {ondelete}")
    return ForeignKeyConstraint(
        [column, "tenant_id"],
        [f"{parent_table}.id", f"{parent_table}.tenant_id"],
        name=f"fk_{table}_{column}_tenant",
        ondelete=ondelete,
    )


def is_tenant_constraint(name: str | None) -> bool:
    """Whether a constraint name was produced by this module."""
    if not name:
        return False
    if name.startswith("uq_") and "_tenant_" in name:
        return True
    return name.startswith("fk_") and name.endswith("_tenant")


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def constraint_name(exc: DBAPIError) -> str | None:
    """Best-effort extraction of the violated constraint's name.

    asyncpg exposes ``constraint_name`` on the exception chained behind the
    SQLAlchemy adapter; psycopg exposes it on ``diag``. Falls back to the
    server message.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return str(name)
        diag = getattr(candidate, "diag", None)
        if diag is not None and getattr(diag, "constraint_name", None):
            return str(diag.constraint_name)

    match = _CONSTRAINT_IN_MESSAGE.search(str(orig))
    return match.group(1) if match else None


def translate_database_error(exc: DBAPIError) -> AppException | None:
    """Map a database error raised inside a tenant transaction.

    Returns:
        CrossTenantConstraintViolation for tenant constraints and row-level
        security write rejections, ConflictError for other integrity errors,
        None when the error is not a constraint problem.
    """
    sqlstate = _sqlstate(exc)
    name = constraint_name(exc)
    details: dict[str, Any] = {"constraint": name} if name else {}

    if sqlstate == INSUFFICIENT_PRIVILEGE and "row-level security" in str(exc.orig):
        return CrossTenantConstraintViolation(error_code="tenant_policy_violation")

    if isinstance(exc, IntegrityError) or sqlstate in {UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION}:
        if is_tenant_constraint(name):
            return CrossTenantConstraintViolation(details=details)
        return ConflictError(details=details)

    return None


def translate_integrity_error(exc: IntegrityError) -> AppException:
    """Map an IntegrityError to the exception surfaced to callers."""
    return translate_database_error(exc) or ConflictError()
