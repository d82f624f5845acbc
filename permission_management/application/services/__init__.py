"""Application services: permission manager, decorators, checker, holder
permission sync and seeding."""

from permission_management.application.services.batch_manager import (
    BatchPermissionManager,
)
from permission_management.application.services.data_seeder import (
    PermissionDataSeeder,
    PermissionInitializer,
)
from permission_management.application.services.event_publishing_manager import (
    EventPublishingPermissionManager,
)
from permission_management.application.services.holder_permission_service import (
    HolderPermissionService,
    PermissionSyncResult,
)
from permission_management.application.services.permission_checker import (
    PermissionCheckResult,
    PermissionChecker,
)
from permission_management.application.services.permission_manager import (
    PermissionManager,
)

__all__ = [
    "BatchPermissionManager",
    "EventPublishingPermissionManager",
    "HolderPermissionService",
    "PermissionCheckResult",
    "PermissionChecker",
    "PermissionDataSeeder",
    "PermissionInitializer",
    "PermissionManager",
    "PermissionSyncResult",
]
