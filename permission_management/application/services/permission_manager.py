"""Permission manager: grant, prohibit and revoke over the grant store."""

from __future__ import annotations

import logging

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.interfaces.stores import IPermissionStore
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.enums import PermissionGrantStatus
from permission_management.domain.holder import validate_holder
from permission_management.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class PermissionManager:
    """Validates the permission name and holder, then writes to the store.

    Grant and prohibit replace any existing record for the key; revoke
    deletes it and succeeds when there is nothing to delete.
    """

    def __init__(
        self, store: IPermissionStore, definitions: PermissionDefinitionManager
    ) -> None:
        self._store = store
        self._definitions = definitions

    def _validate(self, name: str, provider_name: str, provider_key: str) -> None:
        self._definitions.get_permission(name)
        validate_holder(provider_name, provider_key)

    @traced("permission.grant")
    async def grant(self, name: str, provider_name: str, provider_key: str) -> None:
        self._validate(name, provider_name, provider_key)
        await self._store.set_status(
            name, provider_name, provider_key, PermissionGrantStatus.GRANTED
        )
        logger.info("Granted %s to %s/%s", name, provider_name, provider_key)

    @traced("permission.prohibit")
    async def prohibit(self, name: str, provider_name: str, provider_key: str) -> None:
        self._validate(name, provider_name, provider_key)
        await self._store.set_status(
            name, provider_name, provider_key, PermissionGrantStatus.PROHIBITED
        )
        logger.info("Prohibited %s for %s/%s", name, provider_name, provider_key)

    @traced("permission.revoke")
    async def revoke(self, name: str, provider_name: str, provider_key: str) -> None:
        self._validate(name, provider_name, provider_key)
        await self._store.delete(name, provider_name, provider_key)
        logger.info("Revoked %s from %s/%s", name, provider_name, provider_key)

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        validate_holder(provider_name, provider_key)
        return await self._store.get_all(provider_name, provider_key)
