"""Permission catalog entities: permission nodes and permission groups.

A group owns its root permissions; a permission owns its children. The
parent link is a back-reference only. Nodes created through a group or a
parent are reported to the owning catalog (the register callback) so
names stay globally unique across groups.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from permission_management.core.constants import CACHE_KEY_SEP
from permission_management.domain.exceptions import ValidationException

RegisterCallback = Callable[["PermissionDefinition"], None]


def _require_name(name: str, field: str = "name") -> str:
    if not name or not name.strip():
        raise ValidationException(f"{field} cannot be empty", field=field)
    if CACHE_KEY_SEP in name:
        raise ValidationException(
            f"{field} must not contain {CACHE_KEY_SEP!r}: {name}", field=field
        )
    return name


class PermissionDefinition:
    """One node of the permission tree.

    Attributes:
        name: Unique dotted name (e.g. 'UserManagement.Create').
        display_name: Label for UI; defaults to name.
        description: Optional long description.
        is_granted_by_default: Decision used when no holder has an explicit grant.
        group_name: Owning group name.
        parent: Parent node or None for roots.
        children: Ordered child nodes.
    """

    def __init__(
        self,
        name: str,
        display_name: str | None = None,
        description: str | None = None,
        is_granted_by_default: bool = False,
        group_name: str | None = None,
        parent: PermissionDefinition | None = None,
        register: RegisterCallback | None = None,
    ) -> None:
        self.name = _require_name(name)
        self.display_name = display_name or name
        self.description = description
        self.is_granted_by_default = is_granted_by_default
        self.group_name = group_name
        self.parent = parent
        self.children: list[PermissionDefinition] = []
        self._register = register

    def add_child(
        self,
        name: str,
        display_name: str | None = None,
        description: str | None = None,
        is_granted_by_default: bool = False,
    ) -> PermissionDefinition:
        """Create a child permission in this node's group and return it.

        Raises:
            DuplicateDefinitionException: If the name is already in the catalog.
        """
        child = PermissionDefinition(
            name,
            display_name=display_name,
            description=description,
            is_granted_by_default=is_granted_by_default,
            group_name=self.group_name,
            parent=self,
            register=self._register,
        )
        if self._register is not None:
            self._register(child)
        self.children.append(child)
        return child

    @property
    def level(self) -> int:
        """Depth in the tree (roots are level 1)."""
        return 1 if self.parent is None else self.parent.level + 1

    @property
    def full_name(self) -> str:
        """Names of all ancestors and this node joined with '.'."""
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name}.{self.name}"

    def walk(self) -> Iterator[PermissionDefinition]:
        """Yield this node then all descendants, depth-first in insertion order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"PermissionDefinition(name={self.name!r}, group={self.group_name!r})"


class PermissionGroupDefinition:
    """A named group owning a flat list of root permissions."""

    def __init__(
        self,
        name: str,
        display_name: str | None = None,
        register: RegisterCallback | None = None,
    ) -> None:
        self.name = _require_name(name)
        self.display_name = display_name or name
        self.permissions: list[PermissionDefinition] = []
        self._register = register

    def add_permission(
        self,
        name: str,
        display_name: str | None = None,
        description: str | None = None,
        is_granted_by_default: bool = False,
    ) -> PermissionDefinition:
        """Create a root permission in this group and return it.

        Raises:
            DuplicateDefinitionException: If the name is already in the catalog.
        """
        permission = PermissionDefinition(
            name,
            display_name=display_name,
            description=description,
            is_granted_by_default=is_granted_by_default,
            group_name=self.name,
            register=self._register,
        )
        if self._register is not None:
            self._register(permission)
        self.permissions.append(permission)
        return permission

    def get_permission_or_none(self, name: str) -> PermissionDefinition | None:
        """Find a permission anywhere under this group."""
        for permission in self.walk():
            if permission.name == name:
                return permission
        return None

    def walk(self) -> Iterator[PermissionDefinition]:
        """Yield every permission of the group, depth-first."""
        for permission in self.permissions:
            yield from permission.walk()

    def __repr__(self) -> str:
        return f"PermissionGroupDefinition(name={self.name!r})"
