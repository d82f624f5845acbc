"""Grant cache backends, key builders and invalidation."""

from permission_management.infrastructure.cache.invalidation import (
    PermissionCacheInvalidationHandler,
    evict_grant_keys,
)
from permission_management.infrastructure.cache.keys import (
    grant_status_key,
    holder_grants_key,
)
from permission_management.infrastructure.cache.memory_cache import MemoryCacheService
from permission_management.infrastructure.cache.redis_cache import RedisCacheService

__all__ = [
    "MemoryCacheService",
    "PermissionCacheInvalidationHandler",
    "RedisCacheService",
    "evict_grant_keys",
    "grant_status_key",
    "holder_grants_key",
]
