"""Authentication: token handling and identity resolution.

FastAPI dependencies live in ``venuin.core.auth.dependencies`` and the
routes in ``venuin.core.auth.routes``; they are not re-exported here to
keep this package importable from the models.
"""

from venuin.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from venuin.core.auth.principal import PermissionSet, Principal, Role
from venuin.core.auth.resolver import resolve_principal
from venuin.core.auth.schemas import TokenData


__all__ = [
    "PermissionSet",
    "Principal",
    "Role",
    "TokenData",
    "create_access_token",
    "decode_token",
    "hash_password",
    "resolve_principal",
    "verify_password",
]
