"""Definition providers that populate the permission catalog."""

from permission_management.application.providers.dynamic_provider import (
    DynamicPermissionDefinitionProvider,
    load_records,
)
from permission_management.application.providers.system_provider import (
    SystemPermissionDefinitionProvider,
)

__all__ = [
    "DynamicPermissionDefinitionProvider",
    "SystemPermissionDefinitionProvider",
    "load_records",
]
