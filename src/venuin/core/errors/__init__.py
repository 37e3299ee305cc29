"""Error handling module with RFC 7807 Problem Details."""

from venuin.core.errors.exceptions import (
    AppException,
    AuditWriteFailure,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    CrossTenantConstraintViolation,
    IsolationMisconfiguredError,
    MissingTenantContextError,
    NotFoundError,
    ServiceUnavailableError,
    TenantContextAlreadyBoundError,
    ValidationError,
)
from venuin.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    build_problem,
    register_exception_handlers,
)
from venuin.core.errors.retry import is_retryable


__all__ = [
    # Exceptions
    "AppException",
    "AuditWriteFailure",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "CrossTenantConstraintViolation",
    # Handlers
    "FieldError",
    "IsolationMisconfiguredError",
    "MissingTenantContextError",
    "NotFoundError",
    "ProblemDetail",
    "ServiceUnavailableError",
    "TenantContextAlreadyBoundError",
    "ValidationError",
    "build_problem",
    "is_retryable",
    "register_exception_handlers",
]
