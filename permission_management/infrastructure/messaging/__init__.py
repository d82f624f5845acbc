"""Grant change event delivery."""

from permission_management.infrastructure.messaging.event_publisher import (
    InProcessEventPublisher,
    RedisEventPublisher,
    RedisEventSubscriber,
    run_permission_event_listener,
)

__all__ = [
    "InProcessEventPublisher",
    "RedisEventPublisher",
    "RedisEventSubscriber",
    "run_permission_event_listener",
]
