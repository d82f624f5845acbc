"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by the
cached grant store and the cache invalidation handler.
"""

# Cache key prefixes
CACHE_PREFIX_PERMISSION = "permission"
CACHE_SEGMENT_GRANT = "grant"
CACHE_SEGMENT_GRANTS = "grants"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Host (no tenant) segment in cache keys and channels. Tenant segments
# always carry TENANT_SEGMENT_MARKER, so no tenant id can produce the host one.
HOST_TENANT_KEY = "host"
TENANT_SEGMENT_MARKER = "t="

# Redis pub/sub channel prefix for permission change events
EVENT_CHANNEL_PREFIX = "permission_events"

# Holder key limits
HOLDER_KEY_MAX_LENGTH = 256
