"""
Domain events for user mutations and their Celery publisher.

The core only calls send_event(event_type, payload); the envelope's trace id
and timestamp are filled in here, not by the service.
"""

import asyncio
import logging
import time
import uuid
from enum import Enum
from typing import Any

from celery import Task
from prometheus_client import Counter
from pydantic import BaseModel

from app.core.tracing import get_trace_id

logger = logging.getLogger(__name__)

EVENTS_PUBLISHED = Counter(
    "user_events_published_total",
    "User lifecycle events published to the event bus",
    ["event_type"],
)


class UserEventType(str, Enum):
    CREATED = "UserCreated"
    UPDATED = "UserUpdated"
    DELETED = "UserDeleted"


class Event(BaseModel):
    """Envelope sent on the event bus."""

    trace_id: str
    event_type: str
    timestamp: int
    payload: Any


def build_event(event_type: str, payload: Any) -> Event:
    trace_id = get_trace_id()
    # Continue with a fresh id rather than dropping the event
    if trace_id is None:
        trace_id = str(uuid.uuid4())
        logger.info("trace id not found in context, generated %s", trace_id)
    return Event(
        trace_id=trace_id,
        event_type=event_type,
        timestamp=int(time.time()),
        payload=payload,
    )


class CeleryEventHandler:
    """Publishes event envelopes as messages for the user event task."""

    def __init__(self, task: Task, topic: str):
        self._task = task
        self._topic = topic

    async def send_event(self, event_type: str, payload: Any) -> None:
        event = build_event(event_type, payload)
        # Publishing blocks while kombu retries; broker errors propagate to the caller
        await asyncio.to_thread(
            self._task.apply_async,
            args=[event.model_dump(mode="json")],
            queue=self._topic,
        )
        EVENTS_PUBLISHED.labels(event_type=event_type).inc()
