"""Core: config, constants, and ambient tenant context.

Single place for settings and shared constants.
"""

from permission_management.core.config import Settings, get_settings
from permission_management.core.tenant_context import (
    TenantInfo,
    change_tenant,
    current_tenant,
    current_tenant_id,
    set_tenant_id,
)

__all__ = [
    "Settings",
    "TenantInfo",
    "change_tenant",
    "current_tenant",
    "current_tenant_id",
    "get_settings",
    "set_tenant_id",
]
