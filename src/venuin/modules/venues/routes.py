"""Venue API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from venuin.core.auth.dependencies import Binder
from venuin.core.auth.principal import Principal
from venuin.core.permissions.dependencies import require_permission
from venuin.core.permissions.features import PackageLimits
from venuin.modules.packages.repos import PackageRepository
from venuin.modules.venues.models import Venue
from venuin.modules.venues.repos import VenueRepository
from venuin.modules.venues.schemas import VenueCreate, VenueResponse


router = APIRouter(prefix="/venues", tags=["venues"])


@router.get(
    "",
    response_model=list[VenueResponse],
    summary="List venues",
    description="Venues of the caller's tenant.",
)
async def list_venues(
    principal: Annotated[Principal, Depends(require_permission("view_venues"))],
    binder: Binder,
) -> list[VenueResponse]:
    """List the tenant's venues."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        venues = await VenueRepository(session).list_all()
        return [VenueResponse.model_validate(venue) for venue in venues]


@router.post(
    "",
    response_model=VenueResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create venue",
    description="Creates a venue, subject to the package's venue limit.",
)
async def create_venue(
    data: VenueCreate,
    principal: Annotated[Principal, Depends(require_permission("manage_venues"))],
    binder: Binder,
) -> VenueResponse:
    """Create a venue in the caller's tenant."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        repo = VenueRepository(session)
        package = await PackageRepository(session).get_for_tenant(principal.tenant_id)  # type: ignore[arg-type]
        PackageLimits.from_package(package).ensure_within("venues", await repo.count())

        venue = await repo.create(
            Venue(
                tenant_id=principal.tenant_id,
                name=data.name,
                slug=data.slug,
                capacity=data.capacity,
                address=data.address,
            )
        )
        return VenueResponse.model_validate(venue)
