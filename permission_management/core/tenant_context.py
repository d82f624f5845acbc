"""Ambient tenant context.

Middleware (or any unit of work) sets the current tenant in a context
variable; grant stores and the checker read it. ContextVar storage is
per asyncio task, so concurrent requests never observe each other's tenant.

Usage:
    with change_tenant("tenant-a"):
        await manager.grant("UserManagement.Create", "U", "alice")
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True)
class TenantInfo:
    """Immutable snapshot of the active tenant (None id = host)."""

    id: str | None
    name: str | None = None

    @property
    def is_available(self) -> bool:
        return self.id is not None


_HOST = TenantInfo(id=None)

# Current tenant for the logical operation (request, job, test).
_current_tenant: ContextVar[TenantInfo] = ContextVar("current_tenant", default=_HOST)


def current_tenant() -> TenantInfo:
    """Return the active tenant (host tenant when none was set)."""
    return _current_tenant.get()


def set_tenant_id(tenant_id: str | None, tenant_name: str | None = None) -> None:
    """Set the current tenant ID for this context (e.g. request)."""
    _current_tenant.set(TenantInfo(id=tenant_id, name=tenant_name))


@contextmanager
def change_tenant(
    tenant_id: str | None, tenant_name: str | None = None
) -> Iterator[TenantInfo]:
    """Switch the ambient tenant for the duration of the block.

    The previous tenant is restored on every exit path (return, exception,
    cancellation). Nested blocks restore exactly the value active when they
    were entered.

    Args:
        tenant_id: Tenant to activate; None selects the host.
        tenant_name: Optional display name.

    Yields:
        The activated TenantInfo.
    """
    info = TenantInfo(id=tenant_id, name=tenant_name)
    token = _current_tenant.set(info)
    try:
        yield info
    finally:
        _current_tenant.reset(token)


def current_tenant_id() -> str | None:
    """Return the ambient tenant id (None = host)."""
    return _current_tenant.get().id

