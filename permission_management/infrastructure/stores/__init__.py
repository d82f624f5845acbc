"""Grant store implementations and decorators."""

from permission_management.infrastructure.stores.cached_store import CachedPermissionStore
from permission_management.infrastructure.stores.memory_store import (
    InMemoryDynamicPermissionStore,
    InMemoryPermissionStore,
    InMemoryUserRoleSource,
)
from permission_management.infrastructure.stores.multi_tenant_store import (
    MultiTenantPermissionStore,
)

__all__ = [
    "CachedPermissionStore",
    "InMemoryDynamicPermissionStore",
    "InMemoryPermissionStore",
    "InMemoryUserRoleSource",
    "MultiTenantPermissionStore",
]
