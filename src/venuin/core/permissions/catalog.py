"""Static permission catalogue.

Feature identifiers are the ones stored in ``subscription_packages.features``.
Adding a feature means adding one entry to ``FEATURE_PERMISSIONS``.
"""

from collections.abc import Mapping
from types import MappingProxyType


# Always granted to tenant admins, whatever the package
BASE_ADMIN_PERMISSIONS: frozenset[str] = frozenset(
    {
        "view_dashboard",
        "view_venues",
        "manage_venues",
        "view_customers",
        "manage_customers",
        "view_payments",
        "manage_payments",
        "manage_users",
        "manage_settings",
    }
)

FEATURE_PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "dashboard_analytics": frozenset({"view_dashboard", "view_analytics"}),
        "venue_management": frozenset({"view_venues", "manage_venues"}),
        "customer_management": frozenset({"view_customers", "manage_customers"}),
        "payment_processing": frozenset({"view_payments", "manage_payments"}),
        "event_booking": frozenset({"view_events", "manage_events"}),
        "calendar_view": frozenset({"view_calendar"}),
        "proposal_system": frozenset({"view_proposals", "manage_proposals"}),
        "leads_management": frozenset({"view_leads", "manage_leads"}),
        "task_management": frozenset({"view_tasks", "manage_tasks"}),
        "advanced_reports": frozenset({"view_reports", "export_reports"}),
        "floor_plans": frozenset({"view_floor_plans", "manage_floor_plans"}),
        "custom_fields": frozenset({"manage_custom_fields"}),
        "ai_analytics": frozenset({"use_ai_analytics"}),
        "voice_booking": frozenset({"use_voice_booking"}),
    }
)

SUPER_ADMIN_PERMISSIONS: frozenset[str] = frozenset(
    {
        "view_platform_dashboard",
        "manage_tenants",
        "manage_packages",
        "assume_tenant",
        "view_admin_audit",
    }
)

# Every permission a tenant user may be granted by a tenant admin
TENANT_PERMISSIONS: frozenset[str] = BASE_ADMIN_PERMISSIONS.union(*FEATURE_PERMISSIONS.values())


def permissions_for_features(features: list[str] | tuple[str, ...] | frozenset[str]) -> frozenset[str]:
    """Union of the permissions unlocked by ``features``; unknown ids are ignored."""
    return frozenset().union(*(FEATURE_PERMISSIONS.get(feature, frozenset()) for feature in features))


def is_known_feature(feature: str) -> bool:
    return feature in FEATURE_PERMISSIONS
