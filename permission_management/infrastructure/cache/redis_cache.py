"""Redis-based cache service for grant lookups.

Values are JSON envelopes holding the payload, the absolute deadline and
the sliding window. Redis TTL tracks the sliding window; every hit pushes
it forward with EXPIRE, never past the absolute deadline.
"""

from __future__ import annotations

import json
import logging
import math
import time
from typing import Any

import redis.asyncio as redis

from permission_management.core.config import get_settings

logger = logging.getLogger(__name__)

DELETE_ATTEMPTS = 2


class RedisCacheService:
    """Async Redis cache with absolute and sliding expiry.

    Uses permission_management.core.config for connection settings. Call
    connect() at startup and disconnect() at shutdown. Every Redis error is
    logged and reported as a miss or a failed write, never raised.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI; treated
                as connected.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        password = self.settings.redis_password
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Grant cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Return the cached value or None; refresh the sliding window on hit."""
        if not self.is_available() or self.redis is None:
            return None
        try:
            raw = await self.redis.get(key)
            if raw is None:
                logger.debug("Cache MISS: %s", key)
                return None
            envelope = json.loads(raw)
            sliding = envelope.get("s")
            if sliding is not None:
                remaining = envelope["d"] - time.time()
                if remaining <= 0:
                    await self.redis.delete(key)
                    return None
                await self.redis.expire(key, math.ceil(min(sliding, remaining)))
            logger.debug("Cache HIT: %s", key)
            return envelope["v"]
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int,
        sliding_ttl: int | None = None,
    ) -> bool:
        """Store value; Redis expiry is the shorter of ttl and sliding_ttl."""
        if not self.is_available() or self.redis is None:
            return False
        envelope = {"v": value, "d": time.time() + ttl, "s": sliding_ttl}
        expiry = min(ttl, sliding_ttl) if sliding_ttl is not None else ttl
        try:
            await self.redis.set(key, json.dumps(envelope), ex=expiry)
            logger.debug("Cache SET: %s (TTL: %ss, sliding: %s)", key, ttl, sliding_ttl)
            return True
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False

    async def delete(self, *keys: str) -> int:
        """Delete keys, retrying once on a Redis error.

        Deletes evict entries after a write, so a failure here leaves a stale
        decision readable until its sliding or absolute deadline passes.
        """
        if not keys or not self.is_available() or self.redis is None:
            return 0
        for attempt in range(1, DELETE_ATTEMPTS + 1):
            try:
                deleted = await self.redis.delete(*keys)
            except redis.RedisError as e:
                logger.warning(
                    "Cache delete attempt %s/%s failed for keys %s: %s",
                    attempt,
                    DELETE_ATTEMPTS,
                    keys,
                    e,
                )
                continue
            logger.debug("Cache DELETE: %s (%s present)", ", ".join(keys), deleted)
            return int(deleted)
        logger.error(
            "Cache eviction failed; keys stay stale until they expire: %s", ", ".join(keys)
        )
        return 0
