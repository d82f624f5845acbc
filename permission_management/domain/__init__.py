"""Domain layer: catalog entities, grants, events, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from permission_management.domain.entities import (
    DynamicPermissionRecord,
    PermissionDefinition,
    PermissionGrant,
    PermissionGroupDefinition,
    UserRole,
)
from permission_management.domain.enums import PermissionGrantStatus, ProviderName
from permission_management.domain.exceptions import (
    AuthorizationException,
    BatchOperationException,
    DuplicateDefinitionException,
    InvalidHolderKeyException,
    PermissionManagementException,
    UnknownPermissionException,
    ValidationException,
)
from permission_management.domain.value_objects import Principal

__all__ = [
    "AuthorizationException",
    "BatchOperationException",
    "DuplicateDefinitionException",
    "DynamicPermissionRecord",
    "InvalidHolderKeyException",
    "PermissionDefinition",
    "PermissionGrant",
    "PermissionGrantStatus",
    "PermissionGroupDefinition",
    "PermissionManagementException",
    "Principal",
    "ProviderName",
    "UnknownPermissionException",
    "UserRole",
    "ValidationException",
]
