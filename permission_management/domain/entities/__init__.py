"""Domain entities: catalog nodes and groups, grants, dynamic records, user roles.

Pure domain models; no ORM or persistence concerns.
"""

from permission_management.domain.entities.permission_definition import (
    PermissionDefinition,
    PermissionGroupDefinition,
)
from permission_management.domain.entities.permission_grant import (
    DynamicPermissionRecord,
    PermissionGrant,
    UserRole,
)

__all__ = [
    "DynamicPermissionRecord",
    "PermissionDefinition",
    "PermissionGrant",
    "PermissionGroupDefinition",
    "UserRole",
]
