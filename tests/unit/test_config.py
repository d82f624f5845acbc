"""Tests for settings validation and caching."""

import pytest
from pydantic import ValidationError

from permission_management.core.config import Settings, get_settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.cache_enabled is True
    assert settings.cache_backend == "memory"
    assert settings.cache_expiration_minutes == 30
    assert settings.cache_sliding_expiration_minutes == 10
    assert settings.default_group_name == "Default"
    assert settings.dynamic_orphan_policy == "warn"
    assert settings.tenant_header_name == "X-Tenant-ID"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CACHE_EXPIRATION_MINUTES", "60")
    monkeypatch.setenv("DYNAMIC_ORPHAN_POLICY", "error")
    monkeypatch.setenv("ROLE_PERMISSIONS", '{"admin": ["UserManagement"]}')

    settings = get_settings()

    assert settings.cache_expiration_minutes == 60
    assert settings.dynamic_orphan_policy == "error"
    assert settings.role_permissions == {"admin": ["UserManagement"]}
    assert get_settings() is settings


@pytest.mark.parametrize(
    "overrides",
    [
        {"cache_backend": "memcached"},
        {"cache_backend": "redis"},
        {"cache_expiration_minutes": 0},
        {"cache_sliding_expiration_minutes": -1},
        {"cache_expiration_minutes": 5, "cache_sliding_expiration_minutes": 10},
        {"dynamic_orphan_policy": "ignore"},
        {"default_group_name": "  "},
    ],
)
def test_invalid_combinations_are_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_redis_backend_with_redis_enabled() -> None:
    settings = Settings(_env_file=None, cache_backend="redis", redis_enabled=True)
    assert settings.cache_backend == "redis"
