"""HTTP middleware."""

from permission_management.middleware.tenant_context import TenantContextMiddleware

__all__ = ["TenantContextMiddleware"]
