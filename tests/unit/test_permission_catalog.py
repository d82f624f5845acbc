"""Tests for the permission catalog: context, nodes, groups and definition manager."""

import pytest

from permission_management.application.definition_context import (
    PermissionDefinitionContext,
    PermissionDefinitionManager,
)
from permission_management.application.providers import SystemPermissionDefinitionProvider
from permission_management.domain.exceptions import (
    CatalogNotInitializedException,
    DuplicateDefinitionException,
    PermissionGroupNotFoundException,
    UnknownPermissionException,
    ValidationException,
)


def test_added_permissions_are_found_by_name() -> None:
    """get_permission_or_none returns the exact node for every inserted name."""
    context = PermissionDefinitionContext()
    group = context.add_group("Admin")
    parent = group.add_permission("UserManagement", display_name="Users")
    child = parent.add_child("UserManagement.Create", description="Create users")
    grandchild = child.add_child("UserManagement.Create.Bulk")

    assert context.get_permission_or_none("UserManagement") is parent
    assert context.get_permission_or_none("UserManagement.Create") is child
    assert context.get_permission_or_none("UserManagement.Create.Bulk") is grandchild
    assert context.get_permission_or_none("Missing") is None


def test_node_attributes_and_tree_links() -> None:
    context = PermissionDefinitionContext()
    group = context.add_group("Admin", display_name="Administration")
    parent = group.add_permission("UserManagement")
    child = parent.add_child("Create", is_granted_by_default=True)

    assert group.display_name == "Administration"
    assert parent.display_name == "UserManagement"
    assert parent.parent is None
    assert child.parent is parent
    assert parent.children == [child]
    assert child.group_name == "Admin"
    assert child.is_granted_by_default is True
    assert parent.level == 1
    assert child.level == 2
    assert child.full_name == "UserManagement.Create"


def test_duplicate_permission_name_in_same_group_fails() -> None:
    context = PermissionDefinitionContext()
    group = context.add_group("Admin")
    group.add_permission("UserManagement")
    with pytest.raises(DuplicateDefinitionException) as exc_info:
        group.add_permission("UserManagement")
    assert exc_info.value.error_code == "DUPLICATE_DEFINITION"
    assert exc_info.value.details == {"name": "UserManagement", "kind": "permission"}


def test_permission_names_are_unique_across_groups_and_levels() -> None:
    """A child may not reuse a name that exists as a root in another group."""
    context = PermissionDefinitionContext()
    context.add_group("A").add_permission("Shared")
    parent = context.add_group("B").add_permission("Parent")

    with pytest.raises(DuplicateDefinitionException):
        parent.add_child("Shared")
    with pytest.raises(DuplicateDefinitionException):
        context.get_group("B").add_permission("Shared")
    assert parent.children == []
    assert len(context) == 2


def test_duplicate_group_fails() -> None:
    context = PermissionDefinitionContext()
    context.add_group("Admin")
    with pytest.raises(DuplicateDefinitionException) as exc_info:
        context.add_group("Admin")
    assert exc_info.value.details["kind"] == "group"


@pytest.mark.parametrize("name", ["", "   ", "Users:Create"])
def test_invalid_names_are_rejected(name: str) -> None:
    context = PermissionDefinitionContext()
    group = context.add_group("Admin")
    with pytest.raises(ValidationException):
        group.add_permission(name)
    with pytest.raises(ValidationException):
        context.add_group(name)


def test_group_lookup() -> None:
    context = PermissionDefinitionContext()
    group = context.add_group("Admin")
    assert context.get_group("Admin") is group
    assert context.get_group_or_none("Other") is None
    with pytest.raises(PermissionGroupNotFoundException):
        context.get_group("Other")


def test_get_permission_raises_unknown() -> None:
    context = PermissionDefinitionContext()
    with pytest.raises(UnknownPermissionException) as exc_info:
        context.get_permission("Nope")
    assert exc_info.value.details == {"name": "Nope"}


def test_permissions_are_listed_depth_first_in_insertion_order() -> None:
    context = PermissionDefinitionContext()
    admin = context.add_group("Admin")
    users = admin.add_permission("Users")
    users.add_child("Users.Create")
    admin.add_permission("Roles")
    users.add_child("Users.Delete")
    context.add_group("Reports").add_permission("Reports.View")

    assert [p.name for p in context.permissions] == [
        "Users",
        "Users.Create",
        "Users.Delete",
        "Roles",
        "Reports.View",
    ]
    assert [g.name for g in context.groups] == ["Admin", "Reports"]
    assert admin.get_permission_or_none("Users.Delete") is context.get_permission(
        "Users.Delete"
    )


async def test_definition_manager_rejects_reads_before_initialize(provider) -> None:
    manager = PermissionDefinitionManager([provider])
    assert manager.is_initialized is False
    with pytest.raises(CatalogNotInitializedException):
        manager.get_permission("UserManagement")


async def test_definition_manager_runs_providers_once(provider) -> None:
    manager = PermissionDefinitionManager([provider])
    await manager.initialize()
    await manager.initialize()

    assert provider.calls == 1
    assert manager.get_permission("UserManagement.Create").group_name == "Admin"
    assert [g.name for g in manager.get_groups()] == ["Admin", "Reports"]
    assert len(manager.get_permissions()) == 5


async def test_definition_manager_refresh_rebuilds_catalog(provider) -> None:
    manager = PermissionDefinitionManager([provider])
    await manager.initialize()
    first = manager.context

    await manager.refresh()

    assert provider.calls == 2
    assert manager.context is not first
    assert manager.get_permission_or_none("Reports.View") is not None


async def test_failing_provider_leaves_previous_catalog_in_place(provider) -> None:
    class Exploding:
        async def define(self, context: PermissionDefinitionContext) -> None:
            context.add_group("Half")
            raise RuntimeError("boom")

    manager = PermissionDefinitionManager([provider])
    await manager.initialize()
    manager._providers.append(Exploding())

    with pytest.raises(RuntimeError):
        await manager.refresh()
    assert manager.context.get_group_or_none("Half") is None
    assert manager.get_permission_or_none("UserManagement") is not None


async def test_system_provider_defines_administration_tree() -> None:
    manager = PermissionDefinitionManager([SystemPermissionDefinitionProvider()])
    await manager.initialize()

    group = manager.get_group("Administration")
    assert [p.name for p in group.permissions] == [
        "UserManagement",
        "RoleManagement",
        "PermissionManagement",
    ]
    users = manager.get_permission("UserManagement")
    assert [c.name for c in users.children] == [
        "UserManagement.Create",
        "UserManagement.Update",
        "UserManagement.Delete",
        "UserManagement.View",
    ]
    assert manager.get_permission("RoleManagement.View").parent is manager.get_permission(
        "RoleManagement"
    )
    assert all(not p.is_granted_by_default for p in manager.get_permissions())
