"""Customer repository (bound session, row-level security applies)."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.database.constraints import translate_integrity_error
from venuin.modules.customers.models import Customer


class CustomerRepository:
    """Repository for Customer database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, customer: Customer) -> Customer:
        self.session.add(customer)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        await self.session.refresh(customer)
        return customer

    async def list_all(self) -> list[Customer]:
        result = await self.session.execute(select(Customer).order_by(Customer.full_name))
        return list(result.scalars().all())
