"""Subscription package API routes (super admin)."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from venuin.core.auth.dependencies import SuperAdmin
from venuin.modules.packages.repos import PackageRepo
from venuin.modules.packages.schemas import PackageCreate, PackageResponse, PackageUpdate
from venuin.modules.packages.services import PackageSvc


router = APIRouter(prefix="/super-admin/packages", tags=["super-admin"])


@router.get("", response_model=list[PackageResponse], summary="List packages")
async def list_packages(
    _: SuperAdmin,
    repo: PackageRepo,
    include_inactive: bool = False,
) -> list[PackageResponse]:
    """List subscription packages, cheapest first."""
    packages = await repo.list_all(include_inactive=include_inactive)
    return [PackageResponse.model_validate(package) for package in packages]


@router.post(
    "",
    response_model=PackageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create package",
)
async def create_package(data: PackageCreate, _: SuperAdmin, service: PackageSvc) -> PackageResponse:
    """Create a subscription package."""
    return PackageResponse.model_validate(await service.create(data))


@router.patch("/{package_id}", response_model=PackageResponse, summary="Update package")
async def update_package(
    package_id: UUID,
    data: PackageUpdate,
    _: SuperAdmin,
    service: PackageSvc,
) -> PackageResponse:
    """Update a package; tenants on it see the change on their next request."""
    return PackageResponse.model_validate(await service.update(package_id, data))


@router.delete(
    "/{package_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete package",
    description="Fails with 409 while any tenant is assigned to the package.",
)
async def delete_package(package_id: UUID, _: SuperAdmin, service: PackageSvc) -> Response:
    """Delete an unused package."""
    await service.delete(package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
