"""User management API routes (tenant admins)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from venuin.core.auth.principal import Principal
from venuin.core.permissions.dependencies import require_permission
from venuin.modules.users.repos import UserRepo
from venuin.modules.users.schemas import UserCreate, UserResponse
from venuin.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])

ManageUsers = Annotated[Principal, Depends(require_permission("manage_users"))]


@router.get("", response_model=list[UserResponse], summary="List users of the tenant")
async def list_users(principal: ManageUsers, repo: UserRepo) -> list[UserResponse]:
    """List users of the caller's tenant."""
    users, _ = await repo.list_by_tenant(principal.tenant_id)  # type: ignore[arg-type]
    return [UserResponse.model_validate(user) for user in users]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add user",
    description="Adds a user to the caller's tenant, subject to the package's user limit.",
)
async def create_user(data: UserCreate, principal: ManageUsers, service: UserSvc) -> UserResponse:
    """Add a user to the caller's tenant."""
    user = await service.create_user(data, principal)
    return UserResponse.model_validate(user)
