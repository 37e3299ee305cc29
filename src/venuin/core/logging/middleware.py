"""Request context middleware.

Assigns the correlation id and writes one access log entry per request.
The entry is attributed to the tenant the request ran in: the principal
dependency leaves the caller's ids on ``request.state`` and the elevation
route adds the tenant it entered and the audit entry it wrote.
"""

import time
import uuid
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from venuin.core.constants import MAX_REQUEST_ID_LENGTH


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# request.state attributes copied into the access log
ATTRIBUTION_FIELDS = ("tenant_id", "user_id", "role", "elevated_tenant_id", "audit_entry_id")

QUIET_PATHS = ("/health/", "/docs", "/redoc", "/openapi.json")


def request_scope(fields: dict[str, str]) -> str:
    """Classify a request by the data it could reach.

    ``tenant`` for tenant callers, ``elevated`` for a super admin inside a
    tenant, ``platform`` for other authenticated callers and ``anonymous``
    otherwise.
    """
    if "elevated_tenant_id" in fields:
        return "elevated"
    if "tenant_id" in fields:
        return "tenant"
    if "user_id" in fields:
        return "platform"
    return "anonymous"


def attribution(request: Request) -> dict[str, str]:
    """Tenant and caller attribution recorded on ``request.state``."""
    fields = {}
    for name in ATTRIBUTION_FIELDS:
        value = getattr(request.state, name, None)
        if value is not None:
            fields[name] = str(value)
    fields["scope"] = request_scope(fields)
    return fields


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlation id plus a tenant-attributed access log entry.

    The id is taken from ``X-Request-ID`` when the client sends one, stored
    on ``request.state`` for error responses and audit entries, bound to the
    structlog context and echoed in the response.
    """

    def __init__(self, app: Any, quiet_paths: tuple[str, ...] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.quiet_paths = quiet_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id = request_id[:MAX_REQUEST_ID_LENGTH]
        request.state.request_id = request_id
        request.state.trace_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_failed", **self._entry(request, request_id, started))
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path.startswith(self.quiet_paths):
            return response

        entry = self._entry(request, request_id, started)
        entry["status_code"] = response.status_code
        if response.status_code >= 500:
            logger.error("request_completed", **entry)
        elif response.status_code >= 400:
            logger.warning("request_completed", **entry)
        else:
            logger.info("request_completed", **entry)
        return response

    @staticmethod
    def _entry(request: Request, request_id: str, started: float) -> dict[str, Any]:
        return {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            **attribution(request),
        }


def get_client_ip(request: Request) -> str | None:
    """Client address, preferring the first ``X-Forwarded-For`` hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else None)
