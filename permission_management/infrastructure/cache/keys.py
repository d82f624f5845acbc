"""Cache key builders for grant lookups. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys. The host tenant (None) is written as HOST_TENANT_KEY and
every real tenant as TENANT_SEGMENT_MARKER + id, so a tenant named "host"
never shares a key with the host.
"""

from permission_management.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_PERMISSION,
    CACHE_SEGMENT_GRANT,
    CACHE_SEGMENT_GRANTS,
    HOST_TENANT_KEY,
    TENANT_SEGMENT_MARKER,
)


def _validate_key_components(components: list[tuple[str, str]]) -> None:
    """Raise ValueError on the first component containing CACHE_KEY_SEP."""
    for value, name in components:
        if CACHE_KEY_SEP in value:
            raise ValueError(
                f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
            )


def tenant_segment(tenant_id: str | None) -> str:
    """Key segment for a tenant; shared with the event channel names."""
    if tenant_id is None:
        return HOST_TENANT_KEY
    return f"{TENANT_SEGMENT_MARKER}{tenant_id}"


def _join(*parts: str) -> str:
    return CACHE_KEY_SEP.join(parts)


def grant_status_key(
    tenant_id: str | None, name: str, provider_name: str, provider_key: str
) -> str:
    """Key for one grant status: permission:grant:{tenant|host}:{name}:{provider}:{key}."""
    tenant = tenant_segment(tenant_id)
    _validate_key_components([
        (tenant, "tenant_id"),
        (name, "name"),
        (provider_name, "provider_name"),
        (provider_key, "provider_key"),
    ])
    return _join(
        CACHE_PREFIX_PERMISSION, CACHE_SEGMENT_GRANT, tenant, name, provider_name, provider_key
    )


def holder_grants_key(
    tenant_id: str | None, provider_name: str, provider_key: str
) -> str:
    """Key for a holder's grant list: permission:grants:{tenant|host}:{provider}:{key}."""
    tenant = tenant_segment(tenant_id)
    _validate_key_components([
        (tenant, "tenant_id"),
        (provider_name, "provider_name"),
        (provider_key, "provider_key"),
    ])
    return _join(CACHE_PREFIX_PERMISSION, CACHE_SEGMENT_GRANTS, tenant, provider_name, provider_key)
