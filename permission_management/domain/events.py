"""Domain events emitted after grant mutations.

Carry the mutation arguments plus the tenant that was ambient when the
write happened. Serialized as JSON for Redis pub/sub.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from permission_management.shared.utils import utc_now


@dataclass(frozen=True)
class PermissionChangedEvent:
    """Base payload shared by all grant change events."""

    event_type: ClassVar[str] = "permission.changed"

    name: str
    provider_name: str
    provider_key: str
    tenant_id: str | None = None
    occurred_at: str = field(default_factory=lambda: utc_now().isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON publish."""
        data = asdict(self)
        data["event_type"] = self.event_type
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PermissionChangedEvent:
        """Deserialize from a published message, choosing the concrete class by event_type."""
        data = dict(data)
        event_cls = EVENT_TYPES.get(data.pop("event_type", ""), cls)
        return event_cls(**data)


@dataclass(frozen=True)
class PermissionGrantedEvent(PermissionChangedEvent):
    event_type: ClassVar[str] = "permission.granted"


@dataclass(frozen=True)
class PermissionProhibitedEvent(PermissionChangedEvent):
    event_type: ClassVar[str] = "permission.prohibited"


@dataclass(frozen=True)
class PermissionRevokedEvent(PermissionChangedEvent):
    event_type: ClassVar[str] = "permission.revoked"


EVENT_TYPES: dict[str, type[PermissionChangedEvent]] = {
    PermissionGrantedEvent.event_type: PermissionGrantedEvent,
    PermissionProhibitedEvent.event_type: PermissionProhibitedEvent,
    PermissionRevokedEvent.event_type: PermissionRevokedEvent,
}
