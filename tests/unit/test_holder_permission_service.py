"""Tests for replacing a holder's granted permission set."""

import pytest

from permission_management.core.tenant_context import change_tenant
from permission_management.domain.exceptions import (
    InvalidHolderKeyException,
    UnknownPermissionException,
)
from permission_management.domain.value_objects import Principal

bob = Principal(user_id="bob")


@pytest.fixture
def events(system) -> list:
    recorded = []

    async def record(event):
        recorded.append((event.event_type, event.name))

    system.publisher.subscribe(record)
    return recorded


async def _granted_names(system, provider_name: str, provider_key: str) -> set[str]:
    grants = await system.holder_permissions.get_permissions(provider_name, provider_key)
    return {grant.name for grant in grants if grant.is_granted}


async def test_adds_missing_permissions(system, events) -> None:
    result = await system.holder_permissions.set_permissions(
        "U", "bob", ["Reports.Export", "UserManagement.Create"]
    )

    assert result.granted == ["Reports.Export", "UserManagement.Create"]
    assert result.revoked == []
    assert await _granted_names(system, "U", "bob") == {"Reports.Export", "UserManagement.Create"}
    assert await system.checker.is_granted(bob, "Reports.Export") is True
    assert events == [
        ("permission.granted", "Reports.Export"),
        ("permission.granted", "UserManagement.Create"),
    ]


async def test_removes_permissions_not_in_target(system, events) -> None:
    await system.manager.batch_grant(["Reports.Export", "UserManagement"], "R", "admin")
    events.clear()

    result = await system.holder_permissions.set_permissions("R", "admin", ["UserManagement"])

    assert result.granted == []
    assert result.revoked == ["Reports.Export"]
    assert await _granted_names(system, "R", "admin") == {"UserManagement"}
    assert events == [("permission.revoked", "Reports.Export")]


async def test_mixed_add_and_remove(system) -> None:
    await system.manager.batch_grant(["Reports.Export", "UserManagement"], "U", "bob")
    assert await system.checker.is_granted(bob, "UserManagement") is True

    result = await system.holder_permissions.set_permissions(
        "U", "bob", ["UserManagement", "UserManagement.Delete"]
    )

    assert result.granted == ["UserManagement.Delete"]
    assert result.revoked == ["Reports.Export"]
    assert await _granted_names(system, "U", "bob") == {"UserManagement", "UserManagement.Delete"}
    assert await system.checker.is_granted(bob, "Reports.Export") is False


async def test_unknown_name_is_rejected_before_any_write(system, events) -> None:
    await system.manager.grant("Reports.Export", "U", "bob")
    events.clear()

    with pytest.raises(UnknownPermissionException):
        await system.holder_permissions.set_permissions(
            "U", "bob", ["UserManagement.Create", "Nope"]
        )

    assert events == []
    assert await _granted_names(system, "U", "bob") == {"Reports.Export"}


async def test_invalid_holder_is_rejected(system) -> None:
    with pytest.raises(InvalidHolderKeyException):
        await system.holder_permissions.set_permissions("U", "", ["Reports.Export"])


async def test_same_set_changes_nothing(system, events) -> None:
    await system.manager.grant("Reports.Export", "U", "bob")
    events.clear()

    result = await system.holder_permissions.set_permissions(
        "U", "bob", ["Reports.Export", "Reports.Export"]
    )

    assert result.changed is False
    assert events == []


async def test_prohibitions_outside_target_are_kept(system) -> None:
    await system.manager.prohibit("Reports.View", "U", "bob")
    await system.manager.prohibit("Reports.Export", "U", "bob")

    result = await system.holder_permissions.set_permissions("U", "bob", ["Reports.Export"])

    assert result.granted == ["Reports.Export"]
    assert result.revoked == []
    assert await system.checker.is_granted(bob, "Reports.Export") is True
    assert await system.checker.is_granted(bob, "Reports.View") is False


async def test_set_is_scoped_to_ambient_tenant(system) -> None:
    await system.manager.grant("Reports.Export", "U", "bob")

    with change_tenant("acme"):
        result = await system.holder_permissions.set_permissions("U", "bob", [])
        assert result.changed is False

    assert await _granted_names(system, "U", "bob") == {"Reports.Export"}
