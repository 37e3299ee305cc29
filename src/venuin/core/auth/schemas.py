"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from venuin.core.auth.principal import Role
from venuin.core.constants import MAX_PASSWORD_LENGTH


class TokenData(BaseModel):
    """Data extracted from a verified JWT.

    Attributes:
        user_id: The user's UUID (``sub``)
        tenant_id: The claimed tenant (None for super_admin)
        role: The claimed role
        exp: Token expiration time
        type: Token type (only ``access`` is accepted by the API)
        jti: Unique token id
    """

    user_id: UUID
    tenant_id: UUID | None
    role: Role
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    """Login with email and password.

    Super admins omit ``tenant_slug``.
    """

    email: EmailStr
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)
    tenant_slug: str | None = None


class TokenResponse(BaseModel):
    """An issued access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class PrincipalResponse(BaseModel):
    """The resolved identity of the caller."""

    user_id: UUID
    tenant_id: UUID | None
    role: Role
    permissions: list[str]
