"""Super admin tenant routes: listing, provisioning, elevation and audit."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from venuin.core.audit.service import RequestMeta
from venuin.core.auth.dependencies import Elevation, SuperAdmin
from venuin.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from venuin.modules.tenants.models import TenantStatus
from venuin.modules.tenants.repos import TenantRepo
from venuin.modules.tenants.schemas import (
    AssumeTenantRequest,
    AssumeTenantResponse,
    AuditEntryResponse,
    TenantCreate,
    TenantListResponse,
    TenantResponse,
    TenantUpdate,
)
from venuin.modules.tenants.services import TenantSvc
from venuin.modules.venues.repos import VenueRepository
from venuin.modules.venues.schemas import VenueResponse


router = APIRouter(prefix="/super-admin", tags=["super-admin"])


@router.get("/tenants", response_model=TenantListResponse, summary="List tenants")
async def list_tenants(
    _: SuperAdmin,
    repo: TenantRepo,
    tenant_status: TenantStatus | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> TenantListResponse:
    """List tenants with their status and package."""
    tenants, total = await repo.list_all(status=tenant_status, page=page, page_size=page_size)
    return TenantListResponse(
        items=[TenantResponse.model_validate(tenant) for tenant in tenants],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/tenants",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision tenant",
    description="Creates a tenant and its first tenant admin.",
)
async def create_tenant(data: TenantCreate, _: SuperAdmin, service: TenantSvc) -> TenantResponse:
    """Provision a tenant."""
    tenant, _admin = await service.create(data)
    return TenantResponse.model_validate(tenant)


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse, summary="Update tenant")
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    _: SuperAdmin,
    service: TenantSvc,
) -> TenantResponse:
    """Suspend, reactivate, cancel or move a tenant to another package."""
    return TenantResponse.model_validate(await service.update(tenant_id, data))


@router.post(
    "/tenants/{tenant_id}/assume",
    response_model=AssumeTenantResponse,
    summary="Assume tenant",
    description=(
        "Records an audit entry, then reads the tenant's venues as tenant admin "
        "within the same transaction. The elevation ends with the request."
    ),
)
async def assume_tenant(
    tenant_id: UUID,
    data: AssumeTenantRequest,
    principal: SuperAdmin,
    elevation: Elevation,
    request: Request,
) -> AssumeTenantResponse:
    """Enter a tenant for support work."""
    async with elevation.assume_tenant(
        principal,
        tenant_id,
        data.reason,
        request_meta=RequestMeta.from_request(request),
    ) as elevated:
        request.state.elevated_tenant_id = elevated.tenant_id
        request.state.audit_entry_id = elevated.audit_entry.id
        venues = await VenueRepository(elevated.session).list_all()
        return AssumeTenantResponse(
            tenant_id=elevated.tenant_id,
            audit_entry_id=elevated.audit_entry.id,
            permissions=sorted(elevated.permissions),
            venues=[VenueResponse.model_validate(venue) for venue in venues],
        )


@router.get("/audit", response_model=list[AuditEntryResponse], summary="Admin audit trail")
async def list_audit_entries(
    _: SuperAdmin,
    elevation: Elevation,
    tenant_id: UUID | None = None,
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
) -> list[AuditEntryResponse]:
    """Elevation audit entries, most recent first."""
    entries = await elevation.list_entries(tenant_id, limit=limit)
    return [AuditEntryResponse.model_validate(entry) for entry in entries]
