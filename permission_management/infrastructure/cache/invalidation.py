"""Grant cache eviction shared by the cached store and event listeners."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from permission_management.application.interfaces.services import ICacheService
from permission_management.domain.events import PermissionChangedEvent
from permission_management.infrastructure.cache.keys import (
    grant_status_key,
    holder_grants_key,
)

logger = logging.getLogger(__name__)


async def evict_grant_keys(
    cache: ICacheService,
    tenant_id: str | None,
    names: Iterable[str],
    provider_name: str,
    provider_key: str,
) -> None:
    """Delete cached status entries for names plus the holder's list entry."""
    try:
        keys = [
            grant_status_key(tenant_id, name, provider_name, provider_key)
            for name in names
        ]
        keys.append(holder_grants_key(tenant_id, provider_name, provider_key))
    except ValueError:
        # Keys that cannot be built were never cached.
        return
    await cache.delete(*keys)


class PermissionCacheInvalidationHandler:
    """Evicts the cache entries touched by a grant change event.

    Subscribe it to the in-process publisher, or feed it from
    run_permission_event_listener so writes made by other processes
    invalidate this process's cache.
    """

    def __init__(self, cache: ICacheService) -> None:
        self._cache = cache

    async def __call__(self, event: PermissionChangedEvent) -> None:
        if not self._cache.is_available():
            return
        await evict_grant_keys(
            self._cache,
            event.tenant_id,
            [event.name],
            event.provider_name,
            event.provider_key,
        )
        logger.debug(
            "Evicted cached grant %s for %s/%s (tenant %s) on %s",
            event.name,
            event.provider_name,
            event.provider_key,
            event.tenant_id,
            event.event_type,
        )
