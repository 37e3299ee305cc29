"""Admin audit trail for super admin elevation."""

from venuin.core.audit.models import AdminAuditEntry
from venuin.core.audit.service import AdminAuditSink, RequestMeta


__all__ = [
    "AdminAuditEntry",
    "AdminAuditSink",
    "RequestMeta",
]
