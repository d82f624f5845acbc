"""Persistence repositories. Re-exports for composition."""

from permission_management.infrastructure.persistence.repositories.dynamic_permission_repo import (
    SqlDynamicPermissionStore,
)
from permission_management.infrastructure.persistence.repositories.permission_grant_repo import (
    SqlPermissionStore,
)
from permission_management.infrastructure.persistence.repositories.user_role_repo import (
    SqlUserRoleRepository,
)

__all__ = [
    "SqlDynamicPermissionStore",
    "SqlPermissionStore",
    "SqlUserRoleRepository",
]
