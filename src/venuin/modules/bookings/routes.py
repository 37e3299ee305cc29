"""Booking API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from venuin.core.auth.dependencies import Binder
from venuin.core.auth.principal import Principal
from venuin.core.permissions.dependencies import require_feature, require_permission
from venuin.modules.bookings.models import Booking
from venuin.modules.bookings.repos import BookingRepository
from venuin.modules.bookings.schemas import BookingCreate, BookingResponse


router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
    dependencies=[Depends(require_feature("event_booking"))],
)


@router.get("", response_model=list[BookingResponse], summary="List bookings")
async def list_bookings(
    principal: Annotated[Principal, Depends(require_permission("view_events"))],
    binder: Binder,
) -> list[BookingResponse]:
    """List the tenant's bookings."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        bookings = await BookingRepository(session).list_all()
        return [BookingResponse.model_validate(booking) for booking in bookings]


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
    description="The venue and the customer must belong to the caller's tenant.",
)
async def create_booking(
    data: BookingCreate,
    principal: Annotated[Principal, Depends(require_permission("manage_events"))],
    binder: Binder,
) -> BookingResponse:
    """Book a venue for a customer."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        booking = await BookingRepository(session).create(
            Booking(
                tenant_id=principal.tenant_id,
                venue_id=data.venue_id,
                customer_id=data.customer_id,
                event_name=data.event_name,
                starts_at=data.starts_at,
                ends_at=data.ends_at,
                guest_count=data.guest_count,
            )
        )
        return BookingResponse.model_validate(booking)
