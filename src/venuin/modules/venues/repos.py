"""Venue repository.

Takes a session bound by the context binder; row-level security limits
every statement to the bound tenant, so queries carry no tenant filter.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.database.constraints import translate_integrity_error
from venuin.modules.venues.models import Venue


class VenueRepository:
    """Repository for Venue database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, venue: Venue) -> Venue:
        """Insert a venue.

        Raises:
            CrossTenantConstraintViolation: Duplicate slug in the tenant or a
                tenant_id other than the bound one
        """
        self.session.add(venue)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        await self.session.refresh(venue)
        return venue

    async def get_by_id(self, venue_id: UUID) -> Venue | None:
        result = await self.session.execute(select(Venue).where(Venue.id == venue_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Venue]:
        result = await self.session.execute(select(Venue).order_by(Venue.name))
        return list(result.scalars().all())

    async def count(self) -> int:
        return (await self.session.execute(select(func.count()).select_from(Venue))).scalar_one()
