"""Event schemas for the task queue.

These are NOT database models. They're lightweight dataclasses that travel
over the event bus (Redis Pub/Sub) between the API and background workers:

    DeploymentCreator → TaskEvent("PROJECT_DEPLOYMENT_CREATED") → EventBus → deploy worker

Each event has:
- id: unique identifier (for deduplication on the consumer side)
- timestamp: when the event was published
- source: which service published it
- payload: the actual data
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class EventType(str, Enum):
    """Task names understood by the workers."""
    # Deployment lifecycle
    PROJECT_DEPLOYMENT_CREATED = "PROJECT_DEPLOYMENT_CREATED"  # Row inserted, build already requested


@dataclass
class BaseEvent:
    """Base event: all events inherit from this."""
    source: str                                          # "api", "deployment_service", etc.
    event_type: EventType = None                         # Set by subclasses
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    metadata: dict = field(default_factory=dict)         # Extra context (request_id, attempt, ...)

    def to_dict(self) -> dict:
        """Serialize for JSON transport over the event bus."""
        return {
            "id": self.id,
            "event_type": self.event_type.value,
            "source": self.source,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
            "payload": self._payload_dict(),
        }

    def _payload_dict(self) -> dict:
        return {}


@dataclass
class TaskEvent(BaseEvent):
    """A named task with a free-form payload.

    The payload is passed through untouched, so consumers see exactly
    what the publisher sent, e.g. {"id": "<deployment id>"}.
    """
    payload: dict = field(default_factory=dict)

    def _payload_dict(self) -> dict:
        return dict(self.payload)
