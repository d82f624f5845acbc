"""Startup seeding of role permissions from configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from permission_management.application.interfaces.services import IPermissionManager
from permission_management.core.config import Settings, get_settings
from permission_management.domain.enums import ProviderName
from permission_management.domain.exceptions import PermissionManagementException
from permission_management.domain.holder import validate_holder

logger = logging.getLogger(__name__)


class PermissionDataSeeder:
    """Grants configured permissions to roles through the permission manager."""

    def __init__(self, manager: IPermissionManager) -> None:
        self._manager = manager

    def create_roles(self, role_names: Iterable[str]) -> list[str]:
        """Check that role names are usable as holder keys.

        Roles themselves live in the identity subsystem; nothing is stored.

        Raises:
            InvalidHolderKeyException: A role name is empty or malformed.
        """
        roles = list(dict.fromkeys(role_names))
        for role in roles:
            validate_holder(ProviderName.ROLE.value, role)
        if roles:
            logger.info("Default roles: %s", ", ".join(roles))
        return roles

    async def grant_role_permissions(self, role: str, names: Iterable[str]) -> list[str]:
        """Grant each name to R:role. Failures are logged and skipped.

        Returns:
            Names that were granted.
        """
        granted: list[str] = []
        for name in names:
            try:
                await self._manager.grant(name, ProviderName.ROLE.value, role)
            except PermissionManagementException as e:
                logger.warning("Could not grant %s to role %s: %s", name, role, e.message)
                continue
            granted.append(name)
        return granted


class PermissionInitializer:
    """Applies settings.default_roles and settings.role_permissions at startup."""

    def __init__(self, seeder: PermissionDataSeeder, settings: Settings | None = None) -> None:
        self._seeder = seeder
        self._settings = settings or get_settings()

    async def initialize(self) -> dict[str, list[str]]:
        """Seed role grants; return role -> names actually granted."""
        self._seeder.create_roles(self._settings.default_roles)
        result: dict[str, list[str]] = {}
        for role, names in self._settings.role_permissions.items():
            result[role] = await self._seeder.grant_role_permissions(role, names)
            logger.info(
                "Seeded %s/%s permission(s) for role %s",
                len(result[role]),
                len(names),
                role,
            )
        return result
