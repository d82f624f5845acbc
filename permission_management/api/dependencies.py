"""FastAPI dependencies: permission system access and permission guards.

Authentication is external: whatever authenticates the request stores a
Principal on request.state.principal. Requests without one are anonymous.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from permission_management.application.interfaces.services import IBatchPermissionManager
from permission_management.application.services import PermissionChecker
from permission_management.composition import PermissionSystem
from permission_management.domain.value_objects import Principal


def get_permission_system(request: Request) -> PermissionSystem:
    """Return the system stored on app.state by the lifespan."""
    system = getattr(request.app.state, "permission_system", None)
    if system is None:
        raise HTTPException(status_code=503, detail="Permission system not initialized")
    return system


def get_permission_checker(
    system: Annotated[PermissionSystem, Depends(get_permission_system)],
) -> PermissionChecker:
    return system.checker


def get_permission_manager(
    system: Annotated[PermissionSystem, Depends(get_permission_system)],
) -> IBatchPermissionManager:
    return system.manager


def get_principal(request: Request) -> Principal:
    """Return request.state.principal, or an anonymous principal."""
    principal = getattr(request.state, "principal", None)
    if isinstance(principal, Principal):
        return principal
    return Principal.anonymous()


def require_permission(name: str):
    """Dependency factory: require an authenticated principal holding name.

    Raises 401 for anonymous requests and 403 when the checker denies.
    Returns the principal so routes can use it.
    """

    async def _require(
        principal: Annotated[Principal, Depends(get_principal)],
        checker: Annotated[PermissionChecker, Depends(get_permission_checker)],
    ) -> Principal:
        if not principal.is_authenticated:
            raise HTTPException(status_code=401, detail="Not authenticated")
        if not await checker.is_granted(principal, name):
            raise HTTPException(status_code=403, detail=f"Permission denied: {name}")
        return principal

    return _require
