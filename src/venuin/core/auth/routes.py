"""Authentication API routes."""

from fastapi import APIRouter

from venuin.core.auth.dependencies import CurrentPrincipal
from venuin.core.auth.schemas import LoginRequest, PrincipalResponse, TokenResponse
from venuin.core.auth.service import AuthSvc


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Tenant users name their tenant by slug; super admins omit it.",
)
async def login(data: LoginRequest, service: AuthSvc) -> TokenResponse:
    """Login with email and password."""
    _, tokens = await service.login(
        email=data.email,
        password=data.password,
        tenant_slug=data.tenant_slug,
    )
    return tokens


@router.get(
    "/me",
    response_model=PrincipalResponse,
    summary="Current principal",
    description="Returns the resolved identity and effective permissions of the caller.",
)
async def me(principal: CurrentPrincipal) -> PrincipalResponse:
    """Get the caller's identity."""
    return PrincipalResponse(
        user_id=principal.user_id,
        tenant_id=principal.tenant_id,
        role=principal.role,
        permissions=sorted(principal.effective_permissions),
    )
