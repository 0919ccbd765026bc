"""Event bus abstraction: publishes task events for the deploy workers.

BaseEventBus defines the interface; RedisEventBus implements it with
Redis Pub/Sub. Application code only talks to the interface:

    API:    event_bus.publish("PROJECT_DEPLOYMENT_CREATED", TaskEvent(...))
                                    ↓
                              Redis channel → deploy workers

Consuming the channel happens in the workers, outside this repository.
"""

import json
import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis

from .schemas import BaseEvent

logger = logging.getLogger(__name__)


class BaseEventBus(ABC):
    """Abstract event bus: all implementations must follow this interface."""

    @abstractmethod
    async def publish(self, topic: str, event: BaseEvent) -> None:
        """Publish an event to a topic."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class RedisEventBus(BaseEventBus):
    """Redis Pub/Sub implementation of the event bus.

    Publishing is fire-and-forget: Redis does not keep messages for
    subscribers that are offline, and nothing waits for an acknowledgement.
    """

    def __init__(self, redis_url: str):
        self._redis_url = redis_url
        self._client: redis.Redis | None = None

    async def _ensure_connected(self):
        """Lazy connection: only connect when first needed."""
        if self._client is None:
            self._client = redis.from_url(self._redis_url, decode_responses=True)
            logger.info("Connected to Redis at %s", self._redis_url)

    async def publish(self, topic: str, event: BaseEvent) -> None:
        await self._ensure_connected()

        event_json = json.dumps(event.to_dict())
        receivers = await self._client.publish(topic, event_json)

        logger.debug(
            "Published %s to topic '%s' (%s receivers)",
            event.event_type.value,
            topic,
            receivers,
        )

    async def close(self) -> None:
        """Close the Redis connection, if one was opened."""
        if self._client:
            await self._client.close()

        logger.info("Redis event bus closed")


def create_event_bus(backend: str = "redis", **kwargs) -> BaseEventBus:
    """Create an event bus instance based on config.

    Usage:
        event_bus = create_event_bus("redis", redis_url="redis://localhost:6379/0")
    """
    if backend == "redis":
        redis_url = kwargs.get("redis_url")
        if not redis_url:
            raise ValueError("redis_url required for Redis event bus")
        return RedisEventBus(redis_url)

    raise ValueError(f"Unknown event bus backend: {backend}")
