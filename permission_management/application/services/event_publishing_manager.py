"""Permission manager decorator that announces committed grant changes."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from permission_management.application.interfaces.services import (
    IEventPublisher,
    IPermissionManager,
)
from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.events import (
    PermissionChangedEvent,
    PermissionGrantedEvent,
    PermissionProhibitedEvent,
    PermissionRevokedEvent,
)
from permission_management.domain.exceptions import BatchOperationException

logger = logging.getLogger(__name__)


class EventPublishingPermissionManager:
    """Publishes one event per successful write, tagged with the ambient tenant.

    Events go out only after the inner write returned. A publish failure is
    logged and swallowed: the write stays committed. Batch calls are
    forwarded when the inner manager supports them and produce one event
    per name.
    """

    def __init__(self, inner: IPermissionManager, publisher: IEventPublisher) -> None:
        self._inner = inner
        self._publisher = publisher

    async def grant(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.grant(name, provider_name, provider_key)
        await self._publish(PermissionGrantedEvent, [name], provider_name, provider_key)

    async def prohibit(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.prohibit(name, provider_name, provider_key)
        await self._publish(PermissionProhibitedEvent, [name], provider_name, provider_key)

    async def revoke(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.revoke(name, provider_name, provider_key)
        await self._publish(PermissionRevokedEvent, [name], provider_name, provider_key)

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        return await self._inner.get_all(provider_name, provider_key)

    async def batch_grant(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        await self._run_batch(
            "batch_grant", PermissionGrantedEvent, names, provider_name, provider_key
        )

    async def batch_revoke(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        await self._run_batch(
            "batch_revoke", PermissionRevokedEvent, names, provider_name, provider_key
        )

    async def _run_batch(
        self,
        method: str,
        event_cls: type[PermissionChangedEvent],
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
    ) -> None:
        action = getattr(self._inner, method, None)
        if action is None:
            raise NotImplementedError(
                f"{type(self._inner).__name__} does not support batch operations"
            )
        try:
            await action(names, provider_name, provider_key)
        except BatchOperationException as e:
            # Items written before the failure are committed; announce them.
            await self._publish(
                event_cls, e.details["committed"], provider_name, provider_key
            )
            raise
        await self._publish(event_cls, names, provider_name, provider_key)

    async def _publish(
        self,
        event_cls: type[PermissionChangedEvent],
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
    ) -> None:
        tenant_id = current_tenant_id()
        for name in dict.fromkeys(names):
            event = event_cls(
                name=name,
                provider_name=provider_name,
                provider_key=provider_key,
                tenant_id=tenant_id,
            )
            try:
                await self._publisher.publish(event)
            except Exception:
                logger.exception(
                    "Failed to publish %s for %s/%s (write is committed)",
                    event.event_type,
                    provider_name,
                    provider_key,
                )
