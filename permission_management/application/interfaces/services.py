"""Service interfaces (ports) for the application layer.

Protocols define contracts for managers, definition providers, event
publishing and caching (DIP).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from permission_management.application.definition_context import (
        PermissionDefinitionContext,
    )
    from permission_management.domain.entities import PermissionGrant
    from permission_management.domain.events import PermissionChangedEvent


# Definition provider interface
class IPermissionDefinitionProvider(Protocol):
    """Contributes groups and permissions to the catalog at startup."""

    async def define(self, context: PermissionDefinitionContext) -> None:
        """Add groups and permissions to the context."""
        ...


# Permission manager interface
class IPermissionManager(Protocol):
    """Mutation API over the grant store."""

    async def grant(self, name: str, provider_name: str, provider_key: str) -> None:
        """Upsert a GRANTED record for the holder."""
        ...

    async def prohibit(self, name: str, provider_name: str, provider_key: str) -> None:
        """Upsert a PROHIBITED record for the holder."""
        ...

    async def revoke(self, name: str, provider_name: str, provider_key: str) -> None:
        """Delete the holder's record; no error when absent."""
        ...

    async def get_all(
        self, provider_name: str, provider_key: str
    ) -> list[PermissionGrant]:
        """Return every grant of the holder in the ambient tenant."""
        ...


class IBatchPermissionManager(IPermissionManager, Protocol):
    """Manager that also grants or revokes many names for one holder."""

    async def batch_grant(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None: ...

    async def batch_revoke(
        self, names: Sequence[str], provider_name: str, provider_key: str
    ) -> None: ...


# Event publisher interface
class IEventPublisher(Protocol):
    """Delivers grant change events to interested parties."""

    async def publish(self, event: PermissionChangedEvent) -> None:
        """Publish the event; may raise on delivery failure."""
        ...


# Cache service interface
class ICacheService(Protocol):
    """Key-value cache with absolute and sliding expiry.

    Values must be JSON-serializable. get() refreshes the sliding window
    of a hit entry but never extends it past the absolute deadline.
    """

    def is_available(self) -> bool:
        """Return True if the backend is connected and usable."""
        ...

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss or expiry."""
        ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int,
        sliding_ttl: int | None = None,
    ) -> bool:
        """Store value with absolute ttl and optional sliding window (seconds)."""
        ...

    async def delete(self, *keys: str) -> int:
        """Remove keys; return how many existed."""
        ...
