"""FastAPI integration: dependencies, permission guards and error mapping."""

from permission_management.api.dependencies import (
    get_permission_checker,
    get_permission_manager,
    get_permission_system,
    get_principal,
    require_permission,
)
from permission_management.api.exception_handlers import register_exception_handlers

__all__ = [
    "get_permission_checker",
    "get_permission_manager",
    "get_permission_system",
    "get_principal",
    "register_exception_handlers",
    "require_permission",
]
