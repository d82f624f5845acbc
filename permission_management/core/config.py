"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cache, store, and dynamic-definition options are
validated at load time.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_CACHE_BACKENDS = ("memory", "redis")
_ORPHAN_POLICIES = ("warn", "error")


class Settings(BaseSettings):
    """Permission management settings loaded from environment and .env.

    All settings are optional with defaults; cross-field rules are checked
    in validate_cache_and_definitions.
    """

    # App
    app_name: str = "permission-management"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite://)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Redis
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Grant cache: absolute and sliding expiry, both in minutes
    cache_enabled: bool = True
    cache_backend: str = "memory"
    cache_expiration_minutes: int = 30
    cache_sliding_expiration_minutes: int = 10

    # Catalog
    default_group_name: str = "Default"
    dynamic_orphan_policy: str = "warn"

    # Tenant
    tenant_header_name: str = "X-Tenant-ID"

    # Seeding: roles to create and role -> permission names to grant at startup
    default_roles: list[str] = Field(default_factory=list)
    role_permissions: dict[str, list[str]] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache_and_definitions(self) -> "Settings":
        """Validate cache backend, expiry windows, and orphan policy.

        - cache_backend must be 'memory' or 'redis'; 'redis' requires redis_enabled.
        - Expiry windows must be positive; sliding must not exceed absolute.
        - dynamic_orphan_policy must be 'warn' or 'error'.
        """
        if self.cache_backend not in _CACHE_BACKENDS:
            raise ValueError(
                f"cache_backend must be one of {_CACHE_BACKENDS}, got: {self.cache_backend!r}"
            )
        if self.cache_backend == "redis" and not self.redis_enabled:
            raise ValueError(
                "cache_backend 'redis' requires REDIS_ENABLED=true. "
                "Set in environment or .env file."
            )
        if self.cache_expiration_minutes <= 0 or self.cache_sliding_expiration_minutes <= 0:
            raise ValueError("Cache expiration windows must be positive (minutes).")
        if self.cache_sliding_expiration_minutes > self.cache_expiration_minutes:
            raise ValueError(
                "cache_sliding_expiration_minutes must not exceed cache_expiration_minutes"
            )
        if self.dynamic_orphan_policy not in _ORPHAN_POLICIES:
            raise ValueError(
                f"dynamic_orphan_policy must be one of {_ORPHAN_POLICIES}, "
                f"got: {self.dynamic_orphan_policy!r}"
            )
        if not self.default_group_name.strip():
            raise ValueError("default_group_name must not be empty")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
