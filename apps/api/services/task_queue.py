"""Task queue: publishes named tasks for background workers.

Thin layer over the event bus: the API says *what* happened
(task_queue.publish("PROJECT_DEPLOYMENT_CREATED", {"id": ...})) and the
workers subscribed to that name pick it up. Delivery is fire-and-forget.
"""

import logging

from events.bus import BaseEventBus
from events.schemas import EventType, TaskEvent

logger = logging.getLogger(__name__)


class TaskQueue:
    """Publishes TaskEvents on the event bus, one topic per task name."""

    def __init__(self):
        self._event_bus: BaseEventBus | None = None  # Injected by the app on startup

    def set_event_bus(self, event_bus: BaseEventBus | None):
        """Inject the event bus (called during app startup)."""
        self._event_bus = event_bus

    async def publish(self, name: str, payload: dict, source: str = "api") -> None:
        """Publish a task.

        Raises:
            ValueError: name is not a known EventType.
        """
        event_type = EventType(name)

        if self._event_bus is None:
            logger.debug("No event bus configured, dropping task %s", event_type.value)
            return

        event = TaskEvent(source=source, event_type=event_type, payload=payload)
        await self._event_bus.publish(event_type.value, event)
        logger.info("Published task %s (event %s)", event_type.value, event.id)

    async def close(self):
        """Close the underlying event bus."""
        if self._event_bus is not None:
            await self._event_bus.close()
            self._event_bus = None


# Singleton
task_queue = TaskQueue()
