"""Tests for PermissionChecker decisions over the fully wired system."""

import pytest

from permission_management.core.tenant_context import change_tenant, current_tenant_id
from permission_management.domain.exceptions import (
    AuthorizationException,
    UnknownPermissionException,
)
from permission_management.domain.value_objects import Principal

alice = Principal(user_id="alice", role_ids=("admin",))
bob = Principal(user_id="bob")


async def test_end_to_end_child_grant_does_not_imply_parent(system) -> None:
    checker, manager = system.checker, system.manager

    assert await checker.is_granted(bob, "UserManagement.Create") is False

    await manager.grant("UserManagement.Create", "U", bob.user_id)

    assert await checker.is_granted(bob, "UserManagement.Create") is True
    assert await checker.is_granted(bob, "UserManagement") is False


async def test_grant_overrides_default_false(system) -> None:
    await system.manager.grant("Reports.Export", "U", "alice")
    assert await system.checker.is_granted(Principal(user_id="alice"), "Reports.Export") is True


async def test_default_applies_without_grants(system) -> None:
    assert await system.checker.is_granted(bob, "Reports.View") is True
    assert await system.checker.is_granted(bob, "Reports.Export") is False


async def test_user_prohibition_overrides_role_grant(system) -> None:
    await system.manager.grant("Reports.Export", "R", "admin")
    assert await system.checker.is_granted(alice, "Reports.Export") is True

    await system.manager.prohibit("Reports.Export", "U", "alice")

    assert await system.checker.is_granted(alice, "Reports.Export") is False


async def test_role_prohibition_overrides_user_grant_and_default(system) -> None:
    await system.manager.grant("Reports.View", "U", "alice")
    await system.manager.prohibit("Reports.View", "R", "admin")

    assert await system.checker.is_granted(alice, "Reports.View") is False


async def test_client_holder_is_consulted(system) -> None:
    principal = Principal(user_id="bob", client_id="reporting-app")
    await system.manager.grant("Reports.Export", "C", "reporting-app")
    assert await system.checker.is_granted(principal, "Reports.Export") is True

    await system.manager.prohibit("Reports.Export", "C", "reporting-app")
    await system.manager.grant("Reports.Export", "U", "bob")
    assert await system.checker.is_granted(principal, "Reports.Export") is False


async def test_roles_from_role_source_are_added(system, role_source) -> None:
    role_source.add("bob", "auditor")
    role_source.add("bob", "auditor", tenant_id="acme")
    await system.manager.grant("Reports.Export", "R", "auditor")

    assert await system.checker.is_granted(bob, "Reports.Export") is True
    with change_tenant("acme"):
        # Same membership, but the grant lives in the host tenant.
        assert await system.checker.is_granted(bob, "Reports.Export") is False


async def test_revoke_is_idempotent_and_restores_default(system) -> None:
    await system.manager.prohibit("Reports.View", "U", "bob")
    assert await system.checker.is_granted(bob, "Reports.View") is False

    await system.manager.revoke("Reports.View", "U", "bob")
    await system.manager.revoke("Reports.View", "U", "bob")

    assert await system.checker.is_granted(bob, "Reports.View") is True


async def test_check_after_write_is_never_stale(system, clock) -> None:
    """Writes evict cached statuses long before their TTL elapses."""
    for _ in range(3):
        assert await system.checker.is_granted(bob, "Reports.Export") is False
    await system.manager.grant("Reports.Export", "U", "bob")
    assert await system.checker.is_granted(bob, "Reports.Export") is True

    clock.advance(1)
    await system.manager.prohibit("Reports.Export", "U", "bob")
    assert await system.checker.is_granted(bob, "Reports.Export") is False

    await system.manager.batch_revoke(["Reports.Export"], "U", "bob")
    assert await system.checker.is_granted(bob, "Reports.Export") is False
    await system.manager.batch_grant(["Reports.Export"], "U", "bob")
    assert await system.checker.is_granted(bob, "Reports.Export") is True


async def test_tenant_isolation_with_nested_scopes(system) -> None:
    with change_tenant("tenant-a"):
        await system.manager.grant("Reports.Export", "U", "bob")
        assert await system.checker.is_granted(bob, "Reports.Export") is True

        with change_tenant("tenant-b"):
            assert await system.checker.is_granted(bob, "Reports.Export") is False

        assert current_tenant_id() == "tenant-a"
        assert await system.checker.is_granted(bob, "Reports.Export") is True

    assert current_tenant_id() is None
    assert await system.checker.is_granted(bob, "Reports.Export") is False


async def test_tenant_named_host_does_not_read_host_decisions(system) -> None:
    await system.manager.grant("Reports.Export", "U", "alice")
    assert await system.checker.is_granted(alice, "Reports.Export") is True

    with change_tenant("host"):
        assert await system.checker.is_granted(alice, "Reports.Export") is False
        await system.manager.grant("Reports.Export", "U", "bob")

    assert await system.checker.is_granted(bob, "Reports.Export") is False


async def test_unknown_permission_raises(system) -> None:
    with pytest.raises(UnknownPermissionException):
        await system.checker.is_granted(bob, "Nope")


async def test_anonymous_principal_is_never_granted(system) -> None:
    anonymous = Principal.anonymous()

    assert await system.checker.is_granted(anonymous, "Reports.View") is False
    assert await system.checker.is_granted(anonymous, "Nope") is False
    results = await system.checker.is_granted_many(anonymous, ["Reports.View"])
    assert [r.is_granted for r in results] == [False]


async def test_is_granted_many_keeps_order(system) -> None:
    await system.manager.grant("UserManagement.Delete", "R", "admin")

    results = await system.checker.is_granted_many(
        alice, ["UserManagement.Delete", "Reports.Export", "Reports.View"]
    )

    assert [(r.name, r.is_granted) for r in results] == [
        ("UserManagement.Delete", True),
        ("Reports.Export", False),
        ("Reports.View", True),
    ]


async def test_is_granted_many_rejects_unknown_names(system) -> None:
    with pytest.raises(UnknownPermissionException):
        await system.checker.is_granted_many(alice, ["Reports.View", "Nope"])


async def test_require_raises_authorization_error(system) -> None:
    await system.checker.require(bob, "Reports.View")

    with pytest.raises(AuthorizationException) as exc_info:
        await system.checker.require(bob, "Reports.Export")
    assert exc_info.value.error_code == "PERMISSION_DENIED"
    assert exc_info.value.details == {"name": "Reports.Export", "holder": "bob"}
