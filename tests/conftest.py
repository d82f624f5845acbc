"""Pytest configuration and shared fixtures for permission management.

In-memory stores and caches by default; SQL tests use in-memory SQLite via
aiosqlite (see tests/integration/conftest.py).
"""

import pytest

from permission_management.application.definition_context import (
    PermissionDefinitionContext,
    PermissionDefinitionManager,
)
from permission_management.composition import PermissionSystem, build_permission_system
from permission_management.core.config import Settings, get_settings
from permission_management.infrastructure.cache import MemoryCacheService
from permission_management.infrastructure.stores import (
    InMemoryPermissionStore,
    InMemoryUserRoleSource,
)


class SampleDefinitionProvider:
    """Two groups: Admin (UserManagement tree) and Reports (one default-granted)."""

    def __init__(self) -> None:
        self.calls = 0

    async def define(self, context: PermissionDefinitionContext) -> None:
        self.calls += 1
        admin = context.add_group("Admin")
        users = admin.add_permission("UserManagement")
        users.add_child("UserManagement.Create")
        users.add_child("UserManagement.Delete")
        reports = context.add_group("Reports")
        reports.add_permission("Reports.View", is_granted_by_default=True)
        reports.add_permission("Reports.Export")


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def provider() -> SampleDefinitionProvider:
    return SampleDefinitionProvider()


@pytest.fixture
async def definitions(provider: SampleDefinitionProvider) -> PermissionDefinitionManager:
    manager = PermissionDefinitionManager([provider])
    await manager.initialize()
    return manager


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def role_source() -> InMemoryUserRoleSource:
    return InMemoryUserRoleSource()


@pytest.fixture
async def system(
    provider: SampleDefinitionProvider,
    role_source: InMemoryUserRoleSource,
    settings: Settings,
    clock: FakeClock,
) -> PermissionSystem:
    """Fully wired in-memory system with a grant cache, catalog initialized."""
    built = build_permission_system(
        InMemoryPermissionStore(),
        [provider],
        cache=MemoryCacheService(clock=clock),
        role_source=role_source,
        settings=settings,
    )
    await built.startup(seed=False)
    return built
