"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
        expose_details: Whether message and details may be shown to clients.
            Denials set this to False so that responses never reveal whether
            a resource exists in another tenant.
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500
    expose_details: bool = True

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Tenant not found", resource="tenant", resource_id=str(tenant_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Package is in use", details={"package_id": str(package_id)})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation."""

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class AuthenticationError(AppException):
    """Raised when a credential is missing, malformed, expired or tampered with.

    A claimed tenant that does not match the user's stored tenant is also an
    authentication failure; it is never treated as "no tenant".
    """

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401
    expose_details = False


class AuthorizationError(AppException):
    """Raised when a principal lacks the permission for an operation.

    Example:
        raise AuthorizationError(
            "Missing permission",
            error_code="permission_denied",
            details={"required_permission": "manage_venues"},
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403
    expose_details = False


class MissingTenantContextError(AppException):
    """Raised when a tenant-scoped operation is attempted without a tenant."""

    message = "Tenant context is required for this operation"
    error_code = "tenant_context_required"
    status_code = 400


class TenantContextAlreadyBoundError(AppException):
    """Raised when a transaction that already carries a tenant binding is bound again."""

    message = "Tenant context is already bound for this transaction"
    error_code = "tenant_context_already_bound"
    status_code = 500


class CrossTenantConstraintViolation(ConflictError):
    """Raised when the database rejects a write on a tenant constraint.

    Covers per-tenant uniqueness and tenant-aware foreign keys. The message
    never says anything about rows that belong to another tenant.
    """

    message = "The write conflicts with existing data or references an unknown resource"
    error_code = "tenant_constraint_violation"


class AuditWriteFailure(AppException):
    """Raised when the audit entry preceding an elevation cannot be written."""

    message = "Elevation aborted: the audit record could not be written"
    error_code = "audit_write_failed"
    status_code = 503


class IsolationMisconfiguredError(AppException):
    """Raised when row-level security is not in the state the application requires."""

    message = "Tenant isolation is misconfigured"
    error_code = "isolation_misconfigured"
    status_code = 500


class ServiceUnavailableError(AppException):
    """Raised when a required service is unavailable.

    Example:
        raise ServiceUnavailableError("Database connection failed")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503
