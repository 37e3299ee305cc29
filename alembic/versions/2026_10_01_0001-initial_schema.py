"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-01 00:01:00.000000

This migration adds:
- subscription_packages, tenants and users (platform tables)
- venues, customers and bookings (tenant-scoped tables)
- admin_audit_entries
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _tenant_scoped(table: str) -> list[sa.SchemaItem]:
    """tenant_id column, its foreign key and the (id, tenant_id) key."""
    return [
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name=f"fk_{table}_tenant_id_tenants",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("id", "tenant_id", name=f"uq_{table}_id_tenant"),
    ]


def upgrade() -> None:
    """Create the platform and tenant tables."""
    op.create_table(
        "subscription_packages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=63), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "features",
            postgresql.ARRAY(sa.String(length=64)),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("max_venues", sa.Integer(), nullable=True),
        sa.Column("max_users", sa.Integer(), nullable=True),
        sa.Column("price_monthly", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_yearly", sa.Numeric(10, 2), nullable=False),
        sa.Column("billing_interval", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_subscription_packages"),
    )
    op.create_index("ix_subscription_packages_id", "subscription_packages", ["id"])
    op.create_index(
        "ix_subscription_packages_slug", "subscription_packages", ["slug"], unique=True
    )

    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=63), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("subscription_package_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_tenants"),
        sa.ForeignKeyConstraint(
            ["subscription_package_id"],
            ["subscription_packages.id"],
            name="fk_tenants_subscription_package_id_subscription_packages",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_tenants_id", "tenants", ["id"])
    op.create_index("ix_tenants_name", "tenants", ["name"])
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)
    op.create_index("ix_tenants_subscription_package_id", "tenants", ["subscription_package_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.String(length=64)),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_users_tenant_id_tenants",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        sa.CheckConstraint(
            "(role = 'super_admin') = (tenant_id IS NULL)",
            name="ck_users_super_admin_has_no_tenant",
        ),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_tenant_id", "users", ["tenant_id"])
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index(
        "uq_users_platform_email",
        "users",
        ["email"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )

    op.create_table(
        "venues",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=63), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        *_tenant_scoped("venues"),
        sa.PrimaryKeyConstraint("id", name="pk_venues"),
        sa.UniqueConstraint("tenant_id", "slug", name="uq_venues_tenant_slug"),
    )
    op.create_index("ix_venues_id", "venues", ["id"])
    op.create_index("ix_venues_tenant_id", "venues", ["tenant_id"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        *_timestamps(),
        *_tenant_scoped("customers"),
        sa.PrimaryKeyConstraint("id", name="pk_customers"),
        sa.UniqueConstraint("tenant_id", "email", name="uq_customers_tenant_email"),
    )
    op.create_index("ix_customers_id", "customers", ["id"])
    op.create_index("ix_customers_tenant_id", "customers", ["tenant_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("venue_id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("event_name", sa.String(length=255), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        *_tenant_scoped("bookings"),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        # Composite keys: a booking may only reference its own tenant's rows
        sa.ForeignKeyConstraint(
            ["venue_id", "tenant_id"],
            ["venues.id", "venues.tenant_id"],
            name="fk_bookings_venue_id_tenant",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["customer_id", "tenant_id"],
            ["customers.id", "customers.tenant_id"],
            name="fk_bookings_customer_id_tenant",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint("ends_at > starts_at", name="ck_bookings_ends_after_start"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_tenant_id", "bookings", ["tenant_id"])
    op.create_index("ix_bookings_venue_id", "bookings", ["venue_id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])

    op.create_table(
        "admin_audit_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("acting_super_admin_id", sa.Uuid(), nullable=False),
        sa.Column("target_tenant_id", sa.Uuid(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("request_id", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_admin_audit_entries"),
    )
    op.create_index("ix_admin_audit_entries_id", "admin_audit_entries", ["id"])
    op.create_index(
        "ix_admin_audit_entries_acting_super_admin_id",
        "admin_audit_entries",
        ["acting_super_admin_id"],
    )
    op.create_index(
        "ix_admin_audit_entries_target_tenant_id", "admin_audit_entries", ["target_tenant_id"]
    )
    op.create_index("ix_admin_audit_entries_created_at", "admin_audit_entries", ["created_at"])
    op.create_index(
        "ix_admin_audit_entries_target_created",
        "admin_audit_entries",
        ["target_tenant_id", "created_at"],
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("admin_audit_entries")
    op.drop_table("bookings")
    op.drop_table("customers")
    op.drop_table("venues")
    op.drop_table("users")
    op.drop_table("tenants")
    op.drop_table("subscription_packages")
