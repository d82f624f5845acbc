"""Tenant context middleware.

Activates the tenant named by the tenant header (X-Tenant-ID by default)
for the duration of the request, so grant stores and the checker scope
every read and write to it. Requests without the header run as the host.
"""

from __future__ import annotations

from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from permission_management.core.config import get_settings
from permission_management.core.tenant_context import change_tenant


def _tenant_id_from_request(request: Request) -> str | None:
    """Return the stripped tenant header value, or None when absent or blank."""
    tenant_id = request.headers.get(get_settings().tenant_header_name)
    if tenant_id and tenant_id.strip():
        return tenant_id.strip()
    return None


def TenantContextMiddleware(app: Callable) -> Callable:
    """Set the ambient tenant from the request header before the route runs."""

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            with change_tenant(_tenant_id_from_request(request)):
                return await call_next(request)

    return _Middleware(app)
