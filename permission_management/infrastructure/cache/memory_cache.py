"""In-process cache with absolute and sliding expiry.

Default backend when Redis is disabled. Values are stored as JSON text so
callers get the same copy-on-read behavior as with Redis. Expired entries are
dropped when read and swept from the whole map on writes, at most once per
sweep interval.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 60.0


@dataclass
class _Entry:
    payload: str
    expires_at: float
    sliding_ttl: float | None
    idle_deadline: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at or now >= self.idle_deadline


class MemoryCacheService:
    """Dict-backed cache; an entry dies at its absolute deadline or after
    sliding_ttl seconds without a read, whichever comes first.

    Args:
        clock: Monotonic time source in seconds; injectable for tests.
        sweep_interval: Minimum seconds between full expiry sweeps.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    def size(self) -> int:
        """Number of stored entries, expired ones not yet swept included."""
        return len(self._entries)

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        now = self._clock()
        if entry.is_expired(now):
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        if entry.sliding_ttl is not None:
            entry.idle_deadline = now + entry.sliding_ttl
        logger.debug("Cache HIT: %s", key)
        return json.loads(entry.payload)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int,
        sliding_ttl: int | None = None,
    ) -> bool:
        now = self._clock()
        if now >= self._next_sweep:
            self.purge_expired(now)
        expires_at = now + ttl
        self._entries[key] = _Entry(
            payload=json.dumps(value),
            expires_at=expires_at,
            sliding_ttl=sliding_ttl,
            idle_deadline=now + sliding_ttl if sliding_ttl is not None else expires_at,
        )
        logger.debug("Cache SET: %s (TTL: %ss, sliding: %s)", key, ttl, sliding_ttl)
        return True

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                deleted += 1
        logger.debug("Cache DELETE: %s (%s present)", ", ".join(keys), deleted)
        return deleted

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every expired entry and return how many were removed."""
        if now is None:
            now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval
        if expired:
            logger.debug("Cache SWEEP: %s expired entries removed", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
