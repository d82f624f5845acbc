"""Permission checker: the read-path authorization decision.

Policy, over the holder chain user -> roles -> client:

1. any PROHIBITED grant denies;
2. otherwise any GRANTED grant allows;
3. otherwise the permission's is_granted_by_default decides.

Grants are per permission: a grant on a child never implies its parent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.interfaces.stores import (
    IPermissionStore,
    IUserRoleSource,
)
from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import PermissionDefinition
from permission_management.domain.enums import PermissionGrantStatus, ProviderName
from permission_management.domain.exceptions import AuthorizationException
from permission_management.domain.value_objects import Principal
from permission_management.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

Holder = tuple[str, str]


@dataclass(frozen=True)
class PermissionCheckResult:
    """Outcome of one permission in an is_granted_many call."""

    name: str
    is_granted: bool


class PermissionChecker:
    """Answers whether a principal holds a permission in the ambient tenant.

    Args:
        store: Grant store scoped by the ambient tenant.
        definitions: Initialized permission catalog.
        role_source: Optional identity-side role lookup; its roles are added
            after the principal's own role ids.
    """

    def __init__(
        self,
        store: IPermissionStore,
        definitions: PermissionDefinitionManager,
        role_source: IUserRoleSource | None = None,
    ) -> None:
        self._store = store
        self._definitions = definitions
        self._role_source = role_source

    @traced("permission.is_granted")
    async def is_granted(self, principal: Principal, name: str) -> bool:
        """Return the decision for one permission.

        Raises:
            UnknownPermissionException: name is not in the catalog.
        """
        if not principal.is_authenticated:
            return False
        permission = self._definitions.get_permission(name)
        chain = await self._holder_chain(principal)
        return await self._decide(permission, chain)

    async def is_granted_many(
        self, principal: Principal, names: Sequence[str]
    ) -> list[PermissionCheckResult]:
        """Return one result per name, in order, resolving the holder chain once."""
        if not principal.is_authenticated:
            return [PermissionCheckResult(name, False) for name in names]
        permissions = [self._definitions.get_permission(name) for name in names]
        chain = await self._holder_chain(principal)
        return [
            PermissionCheckResult(permission.name, await self._decide(permission, chain))
            for permission in permissions
        ]

    async def require(self, principal: Principal, name: str) -> None:
        """Raise AuthorizationException unless the principal holds the permission."""
        if not await self.is_granted(principal, name):
            raise AuthorizationException(name, holder=principal.user_id)

    async def _holder_chain(self, principal: Principal) -> list[Holder]:
        chain: list[Holder] = []
        if principal.user_id:
            chain.append((ProviderName.USER.value, principal.user_id))

        role_ids = list(principal.role_ids)
        if self._role_source is not None and principal.user_id:
            role_ids.extend(
                await self._role_source.get_role_ids(principal.user_id, current_tenant_id())
            )
        chain.extend((ProviderName.ROLE.value, role_id) for role_id in dict.fromkeys(role_ids))

        if principal.client_id:
            chain.append((ProviderName.CLIENT.value, principal.client_id))
        return chain

    async def _decide(self, permission: PermissionDefinition, chain: list[Holder]) -> bool:
        granted_by: Holder | None = None
        for provider_name, provider_key in chain:
            status = await self._store.get_status(permission.name, provider_name, provider_key)
            if status == PermissionGrantStatus.PROHIBITED:
                logger.debug(
                    "%s denied: prohibited for %s/%s", permission.name, provider_name, provider_key
                )
                add_span_attributes(decision="prohibited")
                return False
            if status == PermissionGrantStatus.GRANTED and granted_by is None:
                granted_by = (provider_name, provider_key)

        if granted_by is not None:
            logger.debug("%s allowed: granted to %s/%s", permission.name, *granted_by)
            add_span_attributes(decision="granted")
            return True
        add_span_attributes(decision="default")
        return permission.is_granted_by_default
