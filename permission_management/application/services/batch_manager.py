"""Batch grant/revoke decorator over a permission manager."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.interfaces.services import IPermissionManager
from permission_management.application.interfaces.stores import (
    IBatchPermissionStore,
    IPermissionStore,
    supports_batch,
)
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.exceptions import BatchOperationException
from permission_management.domain.holder import validate_holder
from permission_management.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

_ItemAction = Callable[[str, str, str], Awaitable[None]]


class BatchPermissionManager:
    """Adds batch_grant/batch_revoke to an inner manager.

    All names are validated before anything is written. With a batch-capable
    store (decided once, here) the batch is one store call. Otherwise names
    are written one by one through the inner manager; the first failure
    stops the loop and raises BatchOperationException listing what was
    already committed. Committed items are not rolled back.
    """

    def __init__(
        self,
        inner: IPermissionManager,
        store: IPermissionStore,
        definitions: PermissionDefinitionManager,
    ) -> None:
        self._inner = inner
        self._definitions = definitions
        self._batch_store: IBatchPermissionStore | None = (
            store if supports_batch(store) else None  # type: ignore[assignment]
        )

    @property
    def uses_batch_store(self) -> bool:
        return self._batch_store is not None

    async def grant(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.grant(name, provider_name, provider_key)

    async def prohibit(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.prohibit(name, provider_name, provider_key)

    async def revoke(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.revoke(name, provider_name, provider_key)

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        return await self._inner.get_all(provider_name, provider_key)

    @traced("permission.batch_grant")
    async def batch_grant(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        unique = self._validate(names, provider_name, provider_key)
        if self._batch_store is not None:
            await self._batch_store.batch_save(unique, provider_name, provider_key, True)
        else:
            await self._per_item("grant", self._inner.grant, unique, provider_name, provider_key)
        logger.info(
            "Batch granted %s permission(s) to %s/%s", len(unique), provider_name, provider_key
        )

    @traced("permission.batch_revoke")
    async def batch_revoke(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        unique = self._validate(names, provider_name, provider_key)
        if self._batch_store is not None:
            await self._batch_store.batch_delete(unique, provider_name, provider_key)
        else:
            await self._per_item("revoke", self._inner.revoke, unique, provider_name, provider_key)
        logger.info(
            "Batch revoked %s permission(s) from %s/%s", len(unique), provider_name, provider_key
        )

    def _validate(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> list[str]:
        validate_holder(provider_name, provider_key)
        unique = list(dict.fromkeys(names))
        for name in unique:
            self._definitions.get_permission(name)
        add_span_attributes(count=len(unique), batch_store=self._batch_store is not None)
        return unique

    @staticmethod
    async def _per_item(
        operation: str,
        action: _ItemAction,
        names: list[str],
        provider_name: str,
        provider_key: str,
    ) -> None:
        committed: list[str] = []
        for name in names:
            try:
                await action(name, provider_name, provider_key)
            except Exception as e:
                logger.warning(
                    "Batch %s stopped at %s for %s/%s after %s item(s): %s",
                    operation,
                    name,
                    provider_name,
                    provider_key,
                    len(committed),
                    e,
                )
                raise BatchOperationException(operation, committed, name, str(e)) from e
            committed.append(name)
