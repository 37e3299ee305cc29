#!/usr/bin/env python
"""
Seed subscription packages and demo tenants for development.

Runs on the maintenance connection (MAINTENANCE_DATABASE_URL), which
bypasses row-level security, the same way provisioning does.
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from typing import Any


# Add src to path for imports
sys.path.insert(0, "src")

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from venuin.config import settings
from venuin.core.auth.backend import hash_password
from venuin.core.auth.principal import Role
from venuin.modules import load_models
from venuin.modules.packages.models import SubscriptionPackage
from venuin.modules.tenants.models import Tenant
from venuin.modules.users.models import User
from venuin.modules.venues.models import Venue


DEMO_PASSWORD = "Demo-Pass-123"

PACKAGES: list[dict[str, Any]] = [
    {
        "name": "Starter",
        "slug": "starter",
        "description": "Single venue with bookings and customers.",
        "features": ["dashboard_analytics", "venue_management", "customer_management", "event_booking"],
        "max_users": 3,
        "max_venues": 1,
        "price_monthly": Decimal("29.00"),
        "price_yearly": Decimal("299.00"),
    },
    {
        "name": "Professional",
        "slug": "professional",
        "description": "Multiple venues with proposals, leads and tasks.",
        "features": [
            "dashboard_analytics",
            "venue_management",
            "customer_management",
            "payment_processing",
            "event_booking",
            "calendar_view",
            "proposal_system",
            "leads_management",
            "task_management",
        ],
        "max_users": 10,
        "max_venues": 3,
        "price_monthly": Decimal("79.00"),
        "price_yearly": Decimal("799.00"),
    },
    {
        "name": "Enterprise",
        "slug": "enterprise",
        "description": "Everything, without limits.",
        "features": [
            "dashboard_analytics",
            "venue_management",
            "customer_management",
            "payment_processing",
            "event_booking",
            "calendar_view",
            "proposal_system",
            "leads_management",
            "task_management",
            "advanced_reports",
            "floor_plans",
            "custom_fields",
            "ai_analytics",
            "voice_booking",
        ],
        "max_users": -1,
        "max_venues": -1,
        "price_monthly": Decimal("149.00"),
        "price_yearly": Decimal("1499.00"),
    },
]

DEMO_TENANTS: list[dict[str, str]] = [
    {"name": "Grand Hall Events", "slug": "grand-hall", "package": "professional", "venue": "Grand Hall"},
    {"name": "Riverside Weddings", "slug": "riverside", "package": "starter", "venue": "Riverside Barn"},
]


async def seed_packages(session: AsyncSession) -> dict[str, SubscriptionPackage]:
    """Create the standard packages that do not exist yet."""
    packages: dict[str, SubscriptionPackage] = {}
    for data in PACKAGES:
        result = await session.execute(
            select(SubscriptionPackage).where(SubscriptionPackage.slug == data["slug"])
        )
        package = result.scalar_one_or_none()

        if package:
            print(f"Package already exists: {package.name}")
        else:
            package = SubscriptionPackage(**data)
            session.add(package)
            await session.flush()
            print(f"Created package: {package.name}")
        packages[data["slug"]] = package

    await session.commit()
    return packages


async def seed_demo(session: AsyncSession) -> None:
    """Create demo tenants with an admin and a venue each, plus a super admin."""
    packages = await seed_packages(session)
    password_hash = hash_password(DEMO_PASSWORD)

    for data in DEMO_TENANTS:
        result = await session.execute(select(Tenant).where(Tenant.slug == data["slug"]))
        if result.scalar_one_or_none():
            print(f"Tenant already exists: {data['name']}")
            continue

        tenant = Tenant(
            name=data["name"],
            slug=data["slug"],
            subscription_package_id=packages[data["package"]].id,
        )
        session.add(tenant)
        await session.flush()

        session.add_all(
            [
                User(
                    tenant_id=tenant.id,
                    email=f"admin@{data['slug']}.example.com",
                    full_name=f"{data['name']} Admin",
                    password_hash=password_hash,
                    role=Role.TENANT_ADMIN.value,
                ),
                Venue(
                    tenant_id=tenant.id,
                    name=data["venue"],
                    slug=data["venue"].lower().replace(" ", "-"),
                    capacity=200,
                ),
            ]
        )
        print(f"Created tenant: {tenant.name} (admin@{data['slug']}.example.com)")

    result = await session.execute(
        select(User).where(User.role == Role.SUPER_ADMIN.value, User.email == "ops@venuin.example.com")
    )
    if result.scalar_one_or_none() is None:
        session.add(
            User(
                tenant_id=None,
                email="ops@venuin.example.com",
                full_name="Platform Operator",
                password_hash=password_hash,
                role=Role.SUPER_ADMIN.value,
            )
        )
        print("Created super admin: ops@venuin.example.com")

    await session.commit()
    print(f"Demo password: {DEMO_PASSWORD}")


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    load_models()
    engine = create_async_engine(settings.async_maintenance_database_url, poolclass=NullPool)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with session_factory() as session:
            if scenario == "packages":
                await seed_packages(session)
            elif scenario == "demo":
                await seed_demo(session)
            else:
                print(f"Unknown scenario: {scenario}")
                print("Available scenarios: packages, demo")
                sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with packages and demo data")
    parser.add_argument(
        "--scenario",
        "-s",
        default="packages",
        help="Seed scenario to run (packages, demo)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario))
