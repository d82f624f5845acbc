"""Grant change event delivery: in-process handlers and Redis pub/sub.

Events are published per tenant on ``permission_events:t={tenant}`` (the host
tenant on ``permission_events:host``) so other processes can evict their
cached grants.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

import redis.asyncio as redis

from permission_management.core.config import get_settings
from permission_management.core.constants import EVENT_CHANNEL_PREFIX
from permission_management.domain.events import PermissionChangedEvent
from permission_management.infrastructure.cache.keys import tenant_segment

logger = logging.getLogger(__name__)

EventHandler = Callable[[PermissionChangedEvent], Awaitable[None]]


class InProcessEventPublisher:
    """Calls registered async handlers in registration order.

    A failing handler stops delivery and propagates its exception.
    """

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    async def publish(self, event: PermissionChangedEvent) -> None:
        for handler in self._handlers:
            await handler(event)


class _RedisPubSubBase:
    """Shared Redis connection and channel logic for permission events."""

    CHANNEL_PREFIX = EVENT_CHANNEL_PREFIX

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        password = self.settings.redis_password
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis pub/sub connection failed: %s", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info("Redis pub/sub connected")

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis pub/sub disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    @classmethod
    def channel_for(cls, tenant_id: str | None) -> str:
        return f"{cls.CHANNEL_PREFIX}:{tenant_segment(tenant_id)}"


class RedisEventPublisher(_RedisPubSubBase):
    """Publishes grant change events as JSON to the tenant's channel.

    Redis errors propagate; the event-publishing manager logs them.
    """

    async def publish(self, event: PermissionChangedEvent) -> None:
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, skipping %s publish", event.event_type)
            return
        channel = self.channel_for(event.tenant_id)
        await self.redis.publish(channel, json.dumps(event.to_dict()))
        logger.debug("Published %s to %s: %s", event.event_type, channel, event.name)


class RedisEventSubscriber(_RedisPubSubBase):
    """Listens on every tenant's permission event channel."""

    async def listen(self) -> AsyncIterator[PermissionChangedEvent]:
        """Yield events as they arrive until cancelled. Malformed messages are skipped."""
        if not self.is_available() or self.redis is None:
            logger.warning("Redis not available for permission event subscription")
            return
        pattern = f"{self.CHANNEL_PREFIX}:*"
        pubsub = self.redis.pubsub()
        try:
            await pubsub.psubscribe(pattern)
            logger.info("Subscribed to %s", pattern)
            async for message in pubsub.listen():
                if message["type"] != "pmessage":
                    continue
                try:
                    data = json.loads(message["data"])
                    yield PermissionChangedEvent.from_dict(data)
                except (json.JSONDecodeError, KeyError, TypeError):
                    logger.exception("Failed to parse permission event message")
        finally:
            await pubsub.punsubscribe(pattern)
            await pubsub.aclose()
            logger.info("Unsubscribed from %s", pattern)


async def run_permission_event_listener(
    subscriber: RedisEventSubscriber, handler: EventHandler
) -> None:
    """Feed every received event to handler. Run as a background task; cancel to stop.

    Handler errors are logged and the loop keeps listening.
    """
    try:
        async for event in subscriber.listen():
            try:
                await handler(event)
            except Exception:
                logger.exception("Permission event handler failed for %s", event.name)
    except asyncio.CancelledError:
        logger.info("Permission event listener cancelled")
        raise
