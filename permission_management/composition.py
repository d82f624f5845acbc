"""Composition root: wires stores, decorators, manager and checker.

Decorator order is fixed here, once:

    store   = Cached(MultiTenant(base))          # cache keys carry the ambient tenant
    manager = EventPublishing(Batch(Manager))    # events only after committed writes

Batch capability is resolved while building the chain; nothing re-checks it
per call.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.interfaces.services import (
    ICacheService,
    IEventPublisher,
    IPermissionDefinitionProvider,
)
from permission_management.application.interfaces.stores import (
    IPermissionStore,
    ITenantScopedPermissionStore,
    IUserRoleSource,
)
from permission_management.application.providers import (
    DynamicPermissionDefinitionProvider,
    SystemPermissionDefinitionProvider,
)
from permission_management.application.services import (
    BatchPermissionManager,
    EventPublishingPermissionManager,
    HolderPermissionService,
    PermissionChecker,
    PermissionDataSeeder,
    PermissionInitializer,
    PermissionManager,
)
from permission_management.core.config import Settings, get_settings
from permission_management.infrastructure.cache import (
    MemoryCacheService,
    PermissionCacheInvalidationHandler,
    RedisCacheService,
)
from permission_management.infrastructure.messaging import (
    InProcessEventPublisher,
    RedisEventPublisher,
    RedisEventSubscriber,
    run_permission_event_listener,
)
from permission_management.infrastructure.persistence.repositories import (
    SqlDynamicPermissionStore,
    SqlPermissionStore,
    SqlUserRoleRepository,
)
from permission_management.infrastructure.stores import (
    CachedPermissionStore,
    MultiTenantPermissionStore,
)

logger = logging.getLogger(__name__)


@dataclass
class PermissionSystem:
    """The wired permission subsystem and its lifecycle hooks."""

    definitions: PermissionDefinitionManager
    store: IPermissionStore
    manager: EventPublishingPermissionManager
    checker: PermissionChecker
    holder_permissions: HolderPermissionService
    publisher: IEventPublisher
    cache: ICacheService | None = None
    settings: Settings = field(default_factory=get_settings)
    subscriber: RedisEventSubscriber | None = None
    _listener: asyncio.Task | None = field(default=None, init=False, repr=False)

    async def startup(self, seed: bool = True) -> None:
        """Connect backends, build the catalog, then seed configured role grants."""
        for resource in (self.cache, self.publisher, self.subscriber):
            connect = getattr(resource, "connect", None)
            if connect is not None:
                await connect()
        await self.definitions.initialize()
        if seed and self.settings.role_permissions:
            await PermissionInitializer(
                PermissionDataSeeder(self.manager), self.settings
            ).initialize()
        if self.subscriber is not None and self.cache is not None:
            handler = PermissionCacheInvalidationHandler(self.cache)
            self._listener = asyncio.create_task(
                run_permission_event_listener(self.subscriber, handler)
            )

    async def shutdown(self) -> None:
        """Stop the event listener and close backend connections."""
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None
        for resource in (self.subscriber, self.publisher, self.cache):
            disconnect = getattr(resource, "disconnect", None)
            if disconnect is not None:
                await disconnect()


def build_permission_system(
    base_store: ITenantScopedPermissionStore,
    providers: Sequence[IPermissionDefinitionProvider],
    *,
    cache: ICacheService | None = None,
    publisher: IEventPublisher | None = None,
    role_source: IUserRoleSource | None = None,
    settings: Settings | None = None,
) -> PermissionSystem:
    """Wrap base_store and wire manager and checker around it.

    Args:
        base_store: Tenant-aware grant backend (SQL or in-memory).
        providers: Definition providers, run in order at startup.
        cache: Grant cache; None disables caching.
        publisher: Event sink; defaults to an in-process publisher.
        role_source: Identity-side role lookup for the checker.
        settings: Defaults to get_settings().
    """
    settings = settings or get_settings()
    definitions = PermissionDefinitionManager(providers)

    store: IPermissionStore = MultiTenantPermissionStore(base_store)
    if cache is not None:
        store = CachedPermissionStore(
            store,
            cache,
            expiration=timedelta(minutes=settings.cache_expiration_minutes),
            sliding_expiration=timedelta(minutes=settings.cache_sliding_expiration_minutes),
            enabled=settings.cache_enabled,
        )

    publisher = publisher or InProcessEventPublisher()
    manager = EventPublishingPermissionManager(
        BatchPermissionManager(PermissionManager(store, definitions), store, definitions),
        publisher,
    )
    checker = PermissionChecker(store, definitions, role_source)
    logger.info(
        "Permission system wired: store=%s cache=%s publisher=%s",
        type(base_store).__name__,
        type(cache).__name__ if cache is not None else None,
        type(publisher).__name__,
    )
    return PermissionSystem(
        definitions=definitions,
        store=store,
        manager=manager,
        checker=checker,
        holder_permissions=HolderPermissionService(manager, definitions),
        publisher=publisher,
        cache=cache,
        settings=settings,
    )


def build_sql_permission_system(
    session_factory: async_sessionmaker[AsyncSession],
    extra_providers: Sequence[IPermissionDefinitionProvider] = (),
    settings: Settings | None = None,
) -> PermissionSystem:
    """Production wiring from settings: SQL stores, configured cache and events.

    Catalog providers: system permissions, then extra_providers, then
    dynamic records from the database.
    """
    settings = settings or get_settings()
    providers: list[IPermissionDefinitionProvider] = [
        SystemPermissionDefinitionProvider(),
        *extra_providers,
        DynamicPermissionDefinitionProvider(
            SqlDynamicPermissionStore(session_factory),
            default_group_name=settings.default_group_name,
            orphan_policy=settings.dynamic_orphan_policy,
        ),
    ]

    cache: ICacheService | None = None
    if settings.cache_enabled:
        cache = RedisCacheService() if settings.cache_backend == "redis" else MemoryCacheService()

    publisher: IEventPublisher
    subscriber: RedisEventSubscriber | None = None
    if settings.redis_enabled:
        publisher = RedisEventPublisher()
        # A Redis cache is shared; only per-process memory caches need remote eviction.
        if isinstance(cache, MemoryCacheService):
            subscriber = RedisEventSubscriber()
    else:
        publisher = InProcessEventPublisher()

    system = build_permission_system(
        SqlPermissionStore(session_factory),
        providers,
        cache=cache,
        publisher=publisher,
        role_source=SqlUserRoleRepository(session_factory),
        settings=settings,
    )
    system.subscriber = subscriber
    return system
