"""Caching decorator over the ambient-tenant grant store.

Reads go through the cache; writes go to the inner store first and then
evict the affected status keys and the holder's list key. TTL expiry only
bounds staleness caused by writers outside this process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import timedelta

from permission_management.application.interfaces.services import ICacheService
from permission_management.application.interfaces.stores import (
    IPermissionStore,
    supports_batch,
)
from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.enums import PermissionGrantStatus
from permission_management.infrastructure.cache.invalidation import evict_grant_keys
from permission_management.infrastructure.cache.keys import (
    grant_status_key,
    holder_grants_key,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION = timedelta(minutes=30)
DEFAULT_SLIDING_EXPIRATION = timedelta(minutes=10)


class CachedPermissionStore:
    """Grant store decorator adding an absolute + sliding expiry read cache.

    Args:
        inner: Store scoped by the ambient tenant.
        cache: Cache backend.
        expiration: Absolute lifetime of an entry.
        sliding_expiration: Idle lifetime, refreshed on every hit.
        enabled: When False every call goes straight to the inner store.
    """

    def __init__(
        self,
        inner: IPermissionStore,
        cache: ICacheService,
        expiration: timedelta = DEFAULT_EXPIRATION,
        sliding_expiration: timedelta = DEFAULT_SLIDING_EXPIRATION,
        enabled: bool = True,
    ) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = int(expiration.total_seconds())
        self._sliding_ttl = int(sliding_expiration.total_seconds())
        self._enabled = enabled
        self.supports_batch = supports_batch(inner)

    def _cache_usable(self) -> bool:
        return self._enabled and self._cache.is_available()

    async def get_status(
        self, name: str, provider_name: str, provider_key: str
    ) -> PermissionGrantStatus:
        if not self._cache_usable():
            return await self._inner.get_status(name, provider_name, provider_key)
        try:
            key = grant_status_key(current_tenant_id(), name, provider_name, provider_key)
        except ValueError:
            logger.debug(
                "Grant cache bypassed for unkeyable holder %s/%s", provider_name, provider_key
            )
            return await self._inner.get_status(name, provider_name, provider_key)

        cached = await self._cache.get(key)
        if cached is not None:
            return PermissionGrantStatus(cached)
        status = await self._inner.get_status(name, provider_name, provider_key)
        await self._cache.set(key, status.value, ttl=self._ttl, sliding_ttl=self._sliding_ttl)
        return status

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        if not self._cache_usable():
            return await self._inner.get_all(provider_name, provider_key)
        try:
            key = holder_grants_key(current_tenant_id(), provider_name, provider_key)
        except ValueError:
            return await self._inner.get_all(provider_name, provider_key)

        cached = await self._cache.get(key)
        if cached is not None:
            return [PermissionGrant.from_dict(item) for item in cached]
        grants = await self._inner.get_all(provider_name, provider_key)
        await self._cache.set(
            key,
            [grant.to_dict() for grant in grants],
            ttl=self._ttl,
            sliding_ttl=self._sliding_ttl,
        )
        return grants

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
    ) -> None:
        await self._inner.set_status(name, provider_name, provider_key, status)
        await self._evict([name], provider_name, provider_key)

    async def delete(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.delete(name, provider_name, provider_key)
        await self._evict([name], provider_name, provider_key)

    async def batch_save(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
    ) -> None:
        await self._inner.batch_save(  # type: ignore[attr-defined]
            names, provider_name, provider_key, is_granted
        )
        await self._evict(names, provider_name, provider_key)

    async def batch_delete(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        await self._inner.batch_delete(  # type: ignore[attr-defined]
            names, provider_name, provider_key
        )
        await self._evict(names, provider_name, provider_key)

    async def _evict(
        self, names: Iterable[str], provider_name: str, provider_key: str
    ) -> None:
        # Runs even when reads bypass the cache (enabled=False).
        if not self._cache.is_available():
            return
        await evict_grant_keys(
            self._cache, current_tenant_id(), names, provider_name, provider_key
        )
