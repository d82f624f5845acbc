"""Persistence models: ORM entities and mixins."""

from permission_management.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
)
from permission_management.infrastructure.persistence.models.permission import (
    DynamicPermissionModel,
    PermissionGrantModel,
    UserRoleModel,
)

__all__ = [
    "CreatedAtMixin",
    "CuidMixin",
    "DynamicPermissionModel",
    "MultiTenantModel",
    "PermissionGrantModel",
    "TenantMixin",
    "UserRoleModel",
]
