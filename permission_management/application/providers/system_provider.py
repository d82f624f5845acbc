"""Built-in permissions for administering users, roles and grants."""

from permission_management.application.definition_context import (
    PermissionDefinitionContext,
)

ADMINISTRATION_GROUP = "Administration"

USER_MANAGEMENT = "UserManagement"
ROLE_MANAGEMENT = "RoleManagement"
PERMISSION_MANAGEMENT = "PermissionManagement"

_CRUD_ACTIONS = ("Create", "Update", "Delete", "View")


class SystemPermissionDefinitionProvider:
    """Defines the Administration group.

    UserManagement and RoleManagement each get Create/Update/Delete/View
    children named '<Parent>.<Action>'.
    """

    async def define(self, context: PermissionDefinitionContext) -> None:
        group = context.add_group(ADMINISTRATION_GROUP, display_name="Administration")

        for root, label in (
            (USER_MANAGEMENT, "User management"),
            (ROLE_MANAGEMENT, "Role management"),
        ):
            permission = group.add_permission(root, display_name=label)
            for action in _CRUD_ACTIONS:
                permission.add_child(
                    f"{root}.{action}", display_name=f"{action} ({label.lower()})"
                )

        group.add_permission(
            PERMISSION_MANAGEMENT,
            display_name="Permission management",
            description="Grant, prohibit and revoke permissions of any holder.",
        )
