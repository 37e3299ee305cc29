"""Integration tests for database-enforced tenant isolation.

All queries run as the runtime role, which cannot bypass row-level
security. The assertions hold without any tenant filter in application
code.
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import delete, func, select, true, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.auth.principal import Role
from venuin.core.database import TenantContextBinder, read_bound_context
from venuin.core.errors import CrossTenantConstraintViolation
from venuin.modules.bookings.models import Booking
from venuin.modules.customers.models import Customer
from venuin.modules.tenants.models import Tenant
from venuin.modules.venues.models import Venue
from venuin.modules.venues.repos import VenueRepository
from tests.conftest import create_venue


pytestmark = pytest.mark.integration


class TestDefaultDeny:
    """Without a bound tenant nothing tenant-scoped is visible or writable."""

    async def test_unbound_session_sees_no_rows(self, db: AsyncSession, venue_a: Venue, venue_b: Venue):
        """An unbound transaction reads zero venues, not all of them."""
        count = await db.scalar(select(func.count()).select_from(Venue))

        assert count == 0

    async def test_unbound_session_cannot_insert(self, db: AsyncSession, tenant_a: Tenant):
        """Writes without a binding fail the policy's WITH CHECK."""
        db.add(Venue(tenant_id=tenant_a.id, name="Rogue Hall", slug="rogue-hall"))

        with pytest.raises(DBAPIError, match="row-level security"):
            await db.flush()

    async def test_context_is_not_visible_after_commit(
        self, binder: TenantContextBinder, db: AsyncSession, tenant_a: Tenant
    ):
        """The binding ends with its transaction."""
        async with binder.transaction(tenant_a.id, Role.TENANT_USER) as session:
            state = await read_bound_context(session)
            assert state.tenant == str(tenant_a.id)
            assert state.role == "tenant_user"

        assert (await read_bound_context(db)).is_clean


class TestTenantIsolation:
    """Tests for reads and writes across tenants."""

    async def test_reads_are_scoped(
        self, binder: TenantContextBinder, tenant_a: Tenant, venue_a: Venue, venue_b: Venue
    ):
        """A tenant sees its own venues only."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            venues = await VenueRepository(session).list_all()

        assert [venue.id for venue in venues] == [venue_a.id]

    async def test_lookup_by_id_of_other_tenant(
        self, binder: TenantContextBinder, tenant_a: Tenant, venue_b: Venue
    ):
        """Another tenant's row is indistinguishable from a missing one."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            assert await VenueRepository(session).get_by_id(venue_b.id) is None

    async def test_updates_and_deletes_do_not_cross(
        self,
        binder: TenantContextBinder,
        maintenance_session: AsyncSession,
        tenant_a: Tenant,
        venue_b: Venue,
    ):
        """UPDATE and DELETE aimed at another tenant's row affect nothing."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            updated = await session.execute(
                update(Venue).where(Venue.id == venue_b.id).values(name="Hijacked")
            )
            deleted = await session.execute(delete(Venue).where(Venue.id == venue_b.id))

        assert updated.rowcount == 0
        assert deleted.rowcount == 0
        row = await maintenance_session.get(Venue, venue_b.id, populate_existing=True)
        assert row is not None
        assert row.name != "Hijacked"

    async def test_cannot_move_row_to_other_tenant(
        self, binder: TenantContextBinder, tenant_a: Tenant, tenant_b: Tenant, venue_a: Venue
    ):
        """Rewriting tenant_id fails the WITH CHECK clause."""
        with pytest.raises(CrossTenantConstraintViolation) as exc_info:
            async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
                await session.execute(
                    update(Venue).where(Venue.id == venue_a.id).values(tenant_id=tenant_b.id)
                )

        assert exc_info.value.error_code == "tenant_policy_violation"

    async def test_cannot_insert_for_other_tenant(
        self, binder: TenantContextBinder, tenant_a: Tenant, tenant_b: Tenant
    ):
        """Inserting a row owned by another tenant is rejected."""
        with pytest.raises(CrossTenantConstraintViolation) as exc_info:
            async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
                session.add(Venue(tenant_id=tenant_b.id, name="Planted", slug="planted"))
                await session.flush()

        assert exc_info.value.error_code == "tenant_policy_violation"

    async def test_rejected_write_is_rolled_back(
        self,
        binder: TenantContextBinder,
        maintenance_session: AsyncSession,
        tenant_a: Tenant,
        tenant_b: Tenant,
    ):
        """Earlier writes in a failed transaction are not committed."""
        with pytest.raises(CrossTenantConstraintViolation):
            async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
                session.add(Venue(tenant_id=tenant_a.id, name="First", slug="first"))
                await session.flush()
                session.add(Venue(tenant_id=tenant_b.id, name="Second", slug="second"))
                await session.flush()

        count = await maintenance_session.scalar(select(func.count()).select_from(Venue))
        assert count == 0


class TestJoins:
    """Every table in a join is filtered, not just the one in FROM."""

    @pytest.fixture
    async def bookings(
        self,
        maintenance_session: AsyncSession,
        tenant_a: Tenant,
        tenant_b: Tenant,
        venue_a: Venue,
        venue_b: Venue,
    ) -> dict[str, Booking]:
        """One customer and one booking per tenant, keyed by tenant."""
        starts_at = datetime.now(UTC) + timedelta(days=30)
        seeded = {}
        for key, tenant, venue in (("a", tenant_a, venue_a), ("b", tenant_b, venue_b)):
            customer = Customer(tenant_id=tenant.id, full_name="Sam", email="sam@example.com")
            maintenance_session.add(customer)
            await maintenance_session.flush()
            booking = Booking(
                tenant_id=tenant.id,
                venue_id=venue.id,
                customer_id=customer.id,
                event_name="Gala",
                starts_at=starts_at,
                ends_at=starts_at + timedelta(hours=4),
            )
            maintenance_session.add(booking)
            seeded[key] = booking
        await maintenance_session.commit()
        return seeded

    async def test_inner_join(
        self, binder: TenantContextBinder, tenant_a: Tenant, bookings: dict[str, Booking]
    ):
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            rows = (
                await session.execute(
                    select(Booking.id, Venue.tenant_id, Customer.tenant_id)
                    .join(Venue, Booking.venue_id == Venue.id)
                    .join(Customer, Booking.customer_id == Customer.id)
                )
            ).all()

        assert rows == [(bookings["a"].id, tenant_a.id, tenant_a.id)]

    async def test_cross_join(
        self, binder: TenantContextBinder, tenant_a: Tenant, bookings: dict[str, Booking]
    ):
        """A cartesian product only pairs the tenant's own rows."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            rows = (
                await session.execute(
                    select(Venue.tenant_id, Customer.tenant_id).join(Customer, true())
                )
            ).all()

        assert rows == [(tenant_a.id, tenant_a.id)]

    async def test_join_on_foreign_tenant_predicate(
        self, binder: TenantContextBinder, tenant_a: Tenant, bookings: dict[str, Booking]
    ):
        """Joining on a mismatching tenant finds nothing to match."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            count = await session.scalar(
                select(func.count())
                .select_from(Booking)
                .join(Venue, Venue.tenant_id != Booking.tenant_id)
            )

        assert count == 0

    async def test_outer_join_aggregate(
        self,
        binder: TenantContextBinder,
        tenant_a: Tenant,
        venue_a: Venue,
        bookings: dict[str, Booking],
    ):
        """Aggregates over an outer join only count the tenant's rows."""
        async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
            rows = (
                await session.execute(
                    select(Venue.id, func.count(Booking.id))
                    .outerjoin(Booking, Booking.venue_id == Venue.id)
                    .group_by(Venue.id)
                )
            ).all()

        assert rows == [(venue_a.id, 1)]


class TestConstraintLayer:
    """Tenant-aware keys hold independently of the policies."""

    @pytest.fixture
    async def customer_a(self, maintenance_session: AsyncSession, tenant_a: Tenant) -> Customer:
        customer = Customer(tenant_id=tenant_a.id, full_name="Dana", email="dana@example.com")
        maintenance_session.add(customer)
        await maintenance_session.commit()
        return customer

    async def test_natural_keys_are_unique_per_tenant(
        self, maintenance_session: AsyncSession, tenant_a: Tenant, tenant_b: Tenant
    ):
        """The same slug may exist once in every tenant."""
        await create_venue(maintenance_session, tenant_a.id, slug="grand-hall")
        await create_venue(maintenance_session, tenant_b.id, slug="grand-hall")

        count = await maintenance_session.scalar(
            select(func.count()).select_from(Venue).where(Venue.slug == "grand-hall")
        )
        assert count == 2

    async def test_duplicate_within_tenant(
        self, binder: TenantContextBinder, tenant_a: Tenant, venue_a: Venue
    ):
        """A duplicate natural key inside one tenant is a tenant constraint violation."""
        with pytest.raises(CrossTenantConstraintViolation) as exc_info:
            async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
                await VenueRepository(session).create(
                    Venue(tenant_id=tenant_a.id, name="Copy", slug=venue_a.slug)
                )

        assert exc_info.value.details["constraint"] == "uq_venues_tenant_slug"

    async def test_reference_to_other_tenants_row(
        self,
        maintenance_session: AsyncSession,
        tenant_a: Tenant,
        customer_a: Customer,
        venue_b: Venue,
    ):
        """The composite foreign key refuses a cross-tenant reference.

        Runs on the maintenance connection, which bypasses row-level
        security: the key holds even where the policies do not apply.
        """
        starts_at = datetime.now(UTC) + timedelta(days=30)
        maintenance_session.add(
            Booking(
                tenant_id=tenant_a.id,
                venue_id=venue_b.id,
                customer_id=customer_a.id,
                event_name="Wedding",
                starts_at=starts_at,
                ends_at=starts_at + timedelta(hours=6),
            )
        )

        with pytest.raises(DBAPIError, match="fk_bookings_venue_id_tenant"):
            await maintenance_session.flush()
        await maintenance_session.rollback()

    async def test_reference_to_other_tenants_row_is_translated(
        self,
        binder: TenantContextBinder,
        tenant_a: Tenant,
        customer_a: Customer,
        venue_b: Venue,
    ):
        """Through the binder the same failure surfaces as a generic conflict."""
        starts_at = datetime.now(UTC) + timedelta(days=30)

        with pytest.raises(CrossTenantConstraintViolation) as exc_info:
            async with binder.transaction(tenant_a.id, Role.TENANT_ADMIN) as session:
                session.add(
                    Booking(
                        tenant_id=tenant_a.id,
                        venue_id=venue_b.id,
                        customer_id=customer_a.id,
                        event_name="Wedding",
                        starts_at=starts_at,
                        ends_at=starts_at + timedelta(hours=6),
                    )
                )
                await session.flush()

        assert exc_info.value.details["constraint"] == "fk_bookings_venue_id_tenant"
        assert str(venue_b.id) not in exc_info.value.message
