"""Grant-side domain entities: persisted grants, dynamic definition records, user roles.

Represent persisted facts independent of the storage backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from permission_management.domain.enums import PermissionGrantStatus
from permission_management.shared.utils import generate_cuid, utc_now


@dataclass
class PermissionGrant:
    """Explicit decision for one permission and one holder in one tenant.

    At most one grant exists per (name, provider_name, provider_key, tenant_id).
    """

    name: str
    provider_name: str
    provider_key: str
    is_granted: bool = True
    tenant_id: str | None = None
    id: str = field(default_factory=generate_cuid)
    created_at: datetime = field(default_factory=utc_now)

    @property
    def status(self) -> PermissionGrantStatus:
        return (
            PermissionGrantStatus.GRANTED
            if self.is_granted
            else PermissionGrantStatus.PROHIBITED
        )

    @property
    def key(self) -> tuple[str, str, str, str | None]:
        """Uniqueness key of the grant."""
        return (self.name, self.provider_name, self.provider_key, self.tenant_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for cache/JSON."""
        return {
            "id": self.id,
            "name": self.name,
            "provider_name": self.provider_name,
            "provider_key": self.provider_key,
            "is_granted": self.is_granted,
            "tenant_id": self.tenant_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PermissionGrant:
        """Deserialize from a to_dict() payload."""
        data = dict(data)
        data["created_at"] = datetime.fromisoformat(data["created_at"])
        return cls(**data)


@dataclass(frozen=True)
class DynamicPermissionRecord:
    """Flat persisted row describing one dynamically defined permission."""

    name: str
    display_name: str | None = None
    description: str | None = None
    parent_name: str | None = None
    is_granted_by_default: bool = False
    group_name: str | None = None


@dataclass(frozen=True)
class UserRole:
    """User-role membership, owned by the identity subsystem."""

    user_id: str
    role_id: str
    tenant_id: str | None = None
