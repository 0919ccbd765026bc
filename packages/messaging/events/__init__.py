"""Event schemas and bus for Ferry's task queue."""

from .schemas import EventType, BaseEvent, TaskEvent
from .bus import BaseEventBus, RedisEventBus, create_event_bus

__all__ = [
    # Schemas
    "EventType",
    "BaseEvent",
    "TaskEvent",
    # Bus
    "BaseEventBus",
    "RedisEventBus",
    "create_event_bus",
]
