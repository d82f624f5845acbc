"""Application interfaces (ports): store and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from permission_management.infrastructure.
"""

from permission_management.application.interfaces.services import (
    IBatchPermissionManager,
    ICacheService,
    IEventPublisher,
    IPermissionDefinitionProvider,
    IPermissionManager,
)
from permission_management.application.interfaces.stores import (
    IBatchPermissionStore,
    IDynamicPermissionStore,
    IPermissionStore,
    ITenantScopedPermissionStore,
    IUserRoleSource,
    supports_batch,
)

__all__ = [
    "IBatchPermissionManager",
    "IBatchPermissionStore",
    "ICacheService",
    "IDynamicPermissionStore",
    "IEventPublisher",
    "IPermissionDefinitionProvider",
    "IPermissionManager",
    "IPermissionStore",
    "ITenantScopedPermissionStore",
    "IUserRoleSource",
    "supports_batch",
]
