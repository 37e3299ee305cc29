"""tenant_isolation

Revision ID: 0002_tenant_isolation
Revises: 0001_initial_schema
Create Date: 2026-10-01 00:02:00.000000

This migration adds:
- venuin_current_tenant() reading the transaction-scoped tenant variable
- forced row-level security and the tenant_isolation policy on every
  tenant-scoped table
- the runtime (NOBYPASSRLS) and maintenance (BYPASSRLS) roles and grants
- the append-only trigger on admin_audit_entries

Must run as a superuser: only a superuser can grant BYPASSRLS.
"""

from typing import Sequence, Union

from alembic import op

from venuin.core.database.policies import (
    AUDIT_TABLE,
    AUDIT_TRIGGER,
    CURRENT_TENANT_FUNCTION,
    drop_table_policy_ddl,
    isolation_ddl,
)


# revision identifiers, used by Alembic.
revision: str = "0002_tenant_isolation"
down_revision: Union[str, None] = "0001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen at this revision; later tenant tables get their own migration
TENANT_TABLES = ("bookings", "customers", "venues")


def upgrade() -> None:
    """Enable row-level security, roles and the audit trigger."""
    for statement in isolation_ddl(TENANT_TABLES):
        op.execute(statement)


def downgrade() -> None:
    """Remove policies, the audit trigger and the helper function.

    Roles are left in place; they may own objects in other databases.
    """
    op.execute(f"DROP TRIGGER IF EXISTS {AUDIT_TRIGGER}_truncate ON {AUDIT_TABLE}")
    op.execute(f"DROP TRIGGER IF EXISTS {AUDIT_TRIGGER} ON {AUDIT_TABLE}")
    op.execute(f"DROP FUNCTION IF EXISTS {AUDIT_TRIGGER}()")
    for table in TENANT_TABLES:
        for statement in drop_table_policy_ddl(table):
            op.execute(statement)
    op.execute(f"DROP FUNCTION IF EXISTS {CURRENT_TENANT_FUNCTION}()")
