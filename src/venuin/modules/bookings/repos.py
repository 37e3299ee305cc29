"""Booking repository (bound session, row-level security applies)."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.database.constraints import translate_integrity_error
from venuin.modules.bookings.models import Booking


class BookingRepository:
    """Repository for Booking database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, booking: Booking) -> Booking:
        """Insert a booking.

        Raises:
            CrossTenantConstraintViolation: If the venue or customer does not
                belong to the booking's tenant
        """
        self.session.add(booking)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        await self.session.refresh(booking)
        return booking

    async def list_all(self) -> list[Booking]:
        result = await self.session.execute(select(Booking).order_by(Booking.starts_at))
        return list(result.scalars().all())
