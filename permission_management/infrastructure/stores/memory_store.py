"""In-memory stores for tests and single-node deployments.

Process-wide maps; contents are lost on restart. Mutations happen after
the last await of a call, so a cancelled call never leaves a half write.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import (
    DynamicPermissionRecord,
    PermissionGrant,
    UserRole,
)
from permission_management.domain.enums import PermissionGrantStatus
from permission_management.domain.exceptions import ValidationException

GrantKey = tuple[str, str, str, str | None]


def _require_explicit(status: PermissionGrantStatus) -> bool:
    """Return is_granted for an explicit status; reject UNDEFINED."""
    if status == PermissionGrantStatus.UNDEFINED:
        raise ValidationException(
            "UNDEFINED is not a storable status; use delete()", field="status"
        )
    return status == PermissionGrantStatus.GRANTED


class InMemoryPermissionStore:
    """Grant store keyed by (name, provider_name, provider_key, tenant_id).

    Args:
        batch: Advertise the batch capability (batch_save/batch_delete).
    """

    def __init__(self, batch: bool = True) -> None:
        self._grants: dict[GrantKey, PermissionGrant] = {}
        self._lock = asyncio.Lock()
        self.supports_batch = batch

    async def get_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> PermissionGrantStatus:
        grant = self._grants.get((name, provider_name, provider_key, tenant_id))
        if grant is None:
            return PermissionGrantStatus.UNDEFINED
        return grant.status

    async def get_all(
        self, provider_name: str, provider_key: str, *, tenant_id: str | None = None
    ) -> list[PermissionGrant]:
        return [
            grant
            for (_, p_name, p_key, t_id), grant in self._grants.items()
            if p_name == provider_name and p_key == provider_key and t_id == tenant_id
        ]

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
        *,
        tenant_id: str | None = None,
    ) -> None:
        is_granted = _require_explicit(status)
        async with self._lock:
            self._put(name, provider_name, provider_key, is_granted, tenant_id)

    async def delete(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> None:
        async with self._lock:
            self._grants.pop((name, provider_name, provider_key, tenant_id), None)

    async def batch_save(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
        *,
        tenant_id: str | None = None,
    ) -> None:
        async with self._lock:
            for name in names:
                self._put(name, provider_name, provider_key, is_granted, tenant_id)

    async def batch_delete(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> None:
        async with self._lock:
            for name in names:
                self._grants.pop((name, provider_name, provider_key, tenant_id), None)

    def _put(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        is_granted: bool,
        tenant_id: str | None,
    ) -> None:
        self._grants[(name, provider_name, provider_key, tenant_id)] = PermissionGrant(
            name=name,
            provider_name=provider_name,
            provider_key=provider_key,
            is_granted=is_granted,
            tenant_id=tenant_id,
        )

    def __len__(self) -> int:
        return len(self._grants)


class InMemoryDynamicPermissionStore:
    """Dynamic definition records per tenant; reads the ambient tenant."""

    def __init__(self, records: Iterable[DynamicPermissionRecord] = ()) -> None:
        self._records: dict[str | None, dict[str, DynamicPermissionRecord]] = {}
        for record in records:
            self._records.setdefault(None, {})[record.name] = record

    async def get_records(self) -> list[DynamicPermissionRecord]:
        return list(self._records.get(current_tenant_id(), {}).values())

    async def save_record(self, record: DynamicPermissionRecord) -> None:
        self._records.setdefault(current_tenant_id(), {})[record.name] = record

    async def delete_record(self, name: str) -> None:
        self._records.get(current_tenant_id(), {}).pop(name, None)


class InMemoryUserRoleSource:
    """User-role memberships held in memory, in insertion order."""

    def __init__(self, memberships: Iterable[UserRole] = ()) -> None:
        self._memberships: list[UserRole] = list(memberships)

    def add(self, user_id: str, role_id: str, tenant_id: str | None = None) -> None:
        membership = UserRole(user_id=user_id, role_id=role_id, tenant_id=tenant_id)
        if membership not in self._memberships:
            self._memberships.append(membership)

    async def get_role_ids(self, user_id: str, tenant_id: str | None) -> list[str]:
        return [
            m.role_id
            for m in self._memberships
            if m.user_id == user_id and m.tenant_id == tenant_id
        ]
