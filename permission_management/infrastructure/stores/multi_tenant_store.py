"""Tenant-scoping decorator over a tenant-aware grant store."""

from __future__ import annotations

from collections.abc import Sequence

from permission_management.application.interfaces.stores import (
    ITenantScopedPermissionStore,
    supports_batch,
)
from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import PermissionGrant
from permission_management.domain.enums import PermissionGrantStatus


class MultiTenantPermissionStore:
    """Injects the ambient tenant id into every read and write of the inner store.

    The tenant is read at call time, so one instance serves concurrent
    requests on different tenants. Batch capability mirrors the inner store.
    """

    def __init__(self, inner: ITenantScopedPermissionStore) -> None:
        self._inner = inner
        self.supports_batch = supports_batch(inner)

    async def get_status(
        self, name: str, provider_name: str, provider_key: str
    ) -> PermissionGrantStatus:
        return await self._inner.get_status(
            name, provider_name, provider_key, tenant_id=current_tenant_id()
        )

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        return await self._inner.get_all(
            provider_name, provider_key, tenant_id=current_tenant_id()
        )

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
    ) -> None:
        await self._inner.set_status(
            name, provider_name, provider_key, status, tenant_id=current_tenant_id()
        )

    async def delete(self, name: str, provider_name: str, provider_key: str) -> None:
        await self._inner.delete(
            name, provider_name, provider_key, tenant_id=current_tenant_id()
        )

    async def batch_save(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
    ) -> None:
        self._require_batch()
        await self._inner.batch_save(  # type: ignore[attr-defined]
            names, provider_name, provider_key, is_granted, tenant_id=current_tenant_id()
        )

    async def batch_delete(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None:
        self._require_batch()
        await self._inner.batch_delete(  # type: ignore[attr-defined]
            names, provider_name, provider_key, tenant_id=current_tenant_id()
        )

    def _require_batch(self) -> None:
        if not self.supports_batch:
            raise NotImplementedError(
                f"{type(self._inner).__name__} does not support batch writes"
            )
