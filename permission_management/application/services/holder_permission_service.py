"""Replace-set management of one holder's granted permissions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.interfaces.services import IBatchPermissionManager
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.holder import validate_holder
from permission_management.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


@dataclass
class PermissionSyncResult:
    """Names written by set_permissions, in write order."""

    granted: list[str] = field(default_factory=list)
    revoked: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.granted or self.revoked)


class HolderPermissionService:
    """Reads and replaces the granted permission set of a user, role or client.

    Writes go through the batch manager so the usual events are published.
    Prohibitions are left alone: only GRANTED records are added or removed.
    """

    def __init__(
        self,
        manager: IBatchPermissionManager,
        definitions: PermissionDefinitionManager,
    ) -> None:
        self._manager = manager
        self._definitions = definitions

    async def get_permissions(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        return await self._manager.get_all(provider_name, provider_key)

    @traced("permission.set_permissions")
    async def set_permissions(
        self, provider_name: str, provider_key: str, names: Sequence[str]
    ) -> PermissionSyncResult:
        """Make names the holder's exact granted set.

        Every name is checked against the catalog before anything is written.
        Missing names are granted (replacing a prohibition if there is one),
        then granted names not in the target are revoked.

        Raises:
            UnknownPermissionException: A target name is not in the catalog.
            InvalidHolderKeyException: The holder is malformed.
        """
        validate_holder(provider_name, provider_key)
        target = list(dict.fromkeys(names))
        for name in target:
            self._definitions.get_permission(name)

        current = await self._manager.get_all(provider_name, provider_key)
        granted_now = [grant.name for grant in current if grant.is_granted]
        target_set = set(target)
        granted_set = set(granted_now)

        result = PermissionSyncResult(
            granted=[name for name in target if name not in granted_set],
            revoked=[],
        )
        for name in granted_now:
            if name in target_set:
                continue
            if self._definitions.get_permission_or_none(name) is None:
                # Left over from a catalog refresh; the manager cannot address it.
                logger.warning(
                    "Skipping revoke of undefined permission %s for %s/%s",
                    name,
                    provider_name,
                    provider_key,
                )
                continue
            result.revoked.append(name)

        add_span_attributes(count=len(result.granted) + len(result.revoked))
        if result.granted:
            await self._manager.batch_grant(result.granted, provider_name, provider_key)
        if result.revoked:
            await self._manager.batch_revoke(result.revoked, provider_name, provider_key)
        logger.info(
            "Set permissions for %s/%s: %s granted, %s revoked",
            provider_name,
            provider_key,
            len(result.granted),
            len(result.revoked),
        )
        return result
