"""Package feature and usage-limit gating."""

from dataclasses import dataclass
from typing import Any

import structlog

from venuin.core.constants import UNLIMITED
from venuin.core.errors import AuthorizationError


logger = structlog.get_logger()


def ensure_feature(features: list[str] | None, feature: str) -> None:
    """Raise unless ``feature`` is part of the package.

    Raises:
        AuthorizationError: feature_not_available
    """
    if feature not in (features or []):
        logger.info("feature_gate_denied", feature=feature)
        raise AuthorizationError(
            "Feature not available in the current package",
            error_code="feature_not_available",
            details={"feature": feature},
        )


@dataclass(frozen=True)
class PackageLimits:
    """Usage limits of a package; -1 or None means unlimited."""

    max_venues: int | None = UNLIMITED
    max_users: int | None = UNLIMITED

    @classmethod
    def from_package(cls, package: Any | None) -> "PackageLimits":
        """Limits of a package; without an active package nothing may be created."""
        if package is None or not package.is_active:
            return cls(max_venues=0, max_users=0)
        return cls(max_venues=package.max_venues, max_users=package.max_users)

    def limit_for(self, resource: str) -> int:
        value = getattr(self, f"max_{resource}")
        return UNLIMITED if value is None else value

    def allows(self, resource: str, current_usage: int) -> bool:
        """Whether one more ``resource`` fits under the limit."""
        limit = self.limit_for(resource)
        return limit == UNLIMITED or current_usage < limit

    def ensure_within(self, resource: str, current_usage: int) -> None:
        """Raise if creating one more ``resource`` would exceed the limit.

        Raises:
            AuthorizationError: usage_limit_exceeded
        """
        if not self.allows(resource, current_usage):
            limit = self.limit_for(resource)
            logger.info(
                "usage_limit_exceeded",
                resource=resource,
                limit=limit,
                current_usage=current_usage,
            )
            raise AuthorizationError(
                f"The current package allows at most {limit} {resource}",
                error_code="usage_limit_exceeded",
                details={"resource": resource, "limit": limit, "current": current_usage},
            )
