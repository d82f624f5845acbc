"""Store interfaces (ports) for grants, dynamic definitions, and user roles.

Two shapes of grant store exist:

- ITenantScopedPermissionStore: base backends; every call names its tenant
  explicitly through the ``tenant_id`` keyword.
- IPermissionStore: what the manager and checker see; the tenant comes from
  the ambient context (MultiTenantPermissionStore adapts one to the other).

Batch writes are an optional capability advertised by a ``supports_batch``
attribute and queried once with ``supports_batch(store)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from permission_management.domain.entities import DynamicPermissionRecord, PermissionGrant
from permission_management.domain.enums import PermissionGrantStatus


class ITenantScopedPermissionStore(Protocol):
    """Grant persistence keyed by (name, provider_name, provider_key, tenant_id)."""

    async def get_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> PermissionGrantStatus:
        """Return GRANTED, PROHIBITED, or UNDEFINED when no record exists."""
        ...

    async def get_all(
        self, provider_name: str, provider_key: str, *, tenant_id: str | None = None
    ) -> list[PermissionGrant]:
        """Return every grant of one holder in one tenant."""
        ...

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
        *,
        tenant_id: str | None = None,
    ) -> None:
        """Upsert the record; UNDEFINED is rejected."""
        ...

    async def delete(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> None:
        """Remove the record; no error when absent."""
        ...


class IPermissionStore(Protocol):
    """Grant persistence scoped by the ambient tenant."""

    async def get_status(
        self, name: str, provider_name: str, provider_key: str
    ) -> PermissionGrantStatus: ...

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]: ...

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
    ) -> None: ...

    async def delete(self, name: str, provider_name: str, provider_key: str) -> None: ...


class IBatchPermissionStore(IPermissionStore, Protocol):
    """Grant store that writes many names for one holder in a single round-trip."""

    supports_batch: bool

    async def batch_save(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
    ) -> None: ...

    async def batch_delete(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None: ...


def supports_batch(store: object) -> bool:
    """Return True if the store advertises the batch capability."""
    return bool(getattr(store, "supports_batch", False))


class IDynamicPermissionStore(Protocol):
    """Persisted flat definition records for the ambient tenant."""

    async def get_records(self) -> list[DynamicPermissionRecord]:
        """Return all records; order is not significant."""
        ...

    async def save_record(self, record: DynamicPermissionRecord) -> None:
        """Insert or replace the record with the same name."""
        ...

    async def delete_record(self, name: str) -> None:
        """Remove the record; no error when absent."""
        ...


class IUserRoleSource(Protocol):
    """Read-only view of user-role memberships owned by the identity subsystem."""

    async def get_role_ids(self, user_id: str, tenant_id: str | None) -> list[str]:
        """Return the user's role ids in a stable order."""
        ...
