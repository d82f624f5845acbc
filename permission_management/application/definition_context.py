"""Permission catalog: the definition context and its lifecycle manager.

The context is mutable only while definition providers run. The manager
builds a fresh context, runs every provider into it, and only then
publishes it to readers; after that the catalog is read without locks.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from permission_management.application.interfaces.services import (
    IPermissionDefinitionProvider,
)
from permission_management.domain.entities import (
    PermissionDefinition,
    PermissionGroupDefinition,
)
from permission_management.domain.exceptions import (
    CatalogNotInitializedException,
    DuplicateDefinitionException,
    PermissionGroupNotFoundException,
    UnknownPermissionException,
)

logger = logging.getLogger(__name__)


class PermissionDefinitionContext:
    """Collects groups and permissions while providers define them.

    Permission names are unique across all groups: every node created
    through a group or parent is indexed here as it is created.
    """

    def __init__(self) -> None:
        self._groups: dict[str, PermissionGroupDefinition] = {}
        self._permissions: dict[str, PermissionDefinition] = {}

    def _register(self, permission: PermissionDefinition) -> None:
        if permission.name in self._permissions:
            raise DuplicateDefinitionException(permission.name)
        self._permissions[permission.name] = permission

    def add_group(
        self, name: str, display_name: str | None = None
    ) -> PermissionGroupDefinition:
        """Create and return a new group.

        Raises:
            ValidationException: If name is empty.
            DuplicateDefinitionException: If a group with this name exists.
        """
        group = PermissionGroupDefinition(
            name, display_name=display_name, register=self._register
        )
        if name in self._groups:
            raise DuplicateDefinitionException(name, kind="group")
        self._groups[name] = group
        return group

    def get_group(self, name: str) -> PermissionGroupDefinition:
        """Return the group or raise PermissionGroupNotFoundException."""
        group = self._groups.get(name)
        if group is None:
            raise PermissionGroupNotFoundException(name)
        return group

    def get_group_or_none(self, name: str) -> PermissionGroupDefinition | None:
        return self._groups.get(name)

    def get_permission_or_none(self, name: str) -> PermissionDefinition | None:
        """Return the permission with this name from any group, or None."""
        return self._permissions.get(name)

    def get_permission(self, name: str) -> PermissionDefinition:
        """Return the permission or raise UnknownPermissionException."""
        permission = self._permissions.get(name)
        if permission is None:
            raise UnknownPermissionException(name)
        return permission

    @property
    def groups(self) -> list[PermissionGroupDefinition]:
        """Groups in creation order."""
        return list(self._groups.values())

    @property
    def permissions(self) -> list[PermissionDefinition]:
        """Every permission, group by group, depth-first in insertion order."""
        return [p for group in self._groups.values() for p in group.walk()]

    def __len__(self) -> int:
        return len(self._permissions)


class PermissionDefinitionManager:
    """Owns the process-wide catalog built from definition providers.

    initialize() runs providers once; refresh() rebuilds into a new context
    and swaps it in, so readers see either the old or the new catalog.
    """

    def __init__(self, providers: Sequence[IPermissionDefinitionProvider]) -> None:
        self._providers = list(providers)
        self._context: PermissionDefinitionContext | None = None
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._context is not None

    async def initialize(self) -> None:
        """Build the catalog if it has not been built yet."""
        async with self._lock:
            if self._context is not None:
                return
            self._context = await self._build()

    async def refresh(self) -> None:
        """Rebuild the catalog from all providers and publish it atomically."""
        async with self._lock:
            self._context = await self._build()

    async def _build(self) -> PermissionDefinitionContext:
        context = PermissionDefinitionContext()
        for provider in self._providers:
            await provider.define(context)
        logger.info(
            "Permission catalog built: %s group(s), %s permission(s) from %s provider(s)",
            len(context.groups),
            len(context),
            len(self._providers),
        )
        return context

    @property
    def context(self) -> PermissionDefinitionContext:
        if self._context is None:
            raise CatalogNotInitializedException()
        return self._context

    def get_permission(self, name: str) -> PermissionDefinition:
        return self.context.get_permission(name)

    def get_permission_or_none(self, name: str) -> PermissionDefinition | None:
        return self.context.get_permission_or_none(name)

    def get_group(self, name: str) -> PermissionGroupDefinition:
        return self.context.get_group(name)

    def get_groups(self) -> list[PermissionGroupDefinition]:
        return self.context.groups

    def get_permissions(self) -> list[PermissionDefinition]:
        return self.context.permissions
