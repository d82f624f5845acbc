"""Tests for role permission seeding at startup."""

import logging

import pytest

from permission_management.application.services import (
    PermissionDataSeeder,
    PermissionInitializer,
)
from permission_management.composition import build_permission_system
from permission_management.core.config import Settings
from permission_management.domain.exceptions import InvalidHolderKeyException
from permission_management.domain.value_objects import Principal
from permission_management.infrastructure.stores import InMemoryPermissionStore


def test_create_roles_deduplicates_and_validates(system) -> None:
    seeder = PermissionDataSeeder(system.manager)

    assert seeder.create_roles(["admin", "editor", "admin"]) == ["admin", "editor"]
    with pytest.raises(InvalidHolderKeyException):
        seeder.create_roles(["ok", "bad:role"])


async def test_grant_role_permissions_skips_unknown_names(system, caplog) -> None:
    seeder = PermissionDataSeeder(system.manager)

    with caplog.at_level(logging.WARNING):
        granted = await seeder.grant_role_permissions(
            "admin", ["UserManagement", "Missing", "Reports.Export"]
        )

    assert granted == ["UserManagement", "Reports.Export"]
    assert "Could not grant Missing to role admin" in caplog.text
    admin = Principal(user_id="carol", role_ids=("admin",))
    assert await system.checker.is_granted(admin, "Reports.Export") is True


async def test_initializer_applies_settings(system) -> None:
    settings = Settings(
        _env_file=None,
        default_roles=["admin", "viewer"],
        role_permissions={
            "admin": ["UserManagement", "UserManagement.Create"],
            "viewer": ["Reports.Export"],
        },
    )

    result = await PermissionInitializer(
        PermissionDataSeeder(system.manager), settings
    ).initialize()

    assert result == {
        "admin": ["UserManagement", "UserManagement.Create"],
        "viewer": ["Reports.Export"],
    }
    viewer = Principal(user_id="dave", role_ids=("viewer",))
    assert await system.checker.is_granted(viewer, "Reports.Export") is True
    assert await system.checker.is_granted(viewer, "UserManagement") is False


async def test_startup_seeds_configured_role_permissions(provider) -> None:
    settings = Settings(_env_file=None, role_permissions={"admin": ["Reports.Export"]})
    system = build_permission_system(InMemoryPermissionStore(), [provider], settings=settings)

    await system.startup()

    grants = await system.manager.get_all("R", "admin")
    assert [g.name for g in grants] == ["Reports.Export"]
    await system.shutdown()
