"""
Event envelope and Celery publisher tests (no broker: the task is mocked).
"""

import threading
import uuid
from unittest.mock import MagicMock

import pytest

from app.core.tracing import reset_trace_id, set_trace_id
from app.queue.events import CeleryEventHandler, UserEventType, build_event
from app.queue.tasks import handle_user_event


@pytest.fixture
def trace_id():
    token = set_trace_id("trace-123")
    yield "trace-123"
    reset_trace_id(token)


def test_build_event_uses_context_trace_id(trace_id):
    event = build_event("UserCreated", "some-id")

    assert event.trace_id == trace_id
    assert event.event_type == "UserCreated"
    assert event.payload == "some-id"
    assert event.timestamp > 0


def test_build_event_generates_trace_id_when_missing():
    event = build_event("UserDeleted", "some-id")
    assert uuid.UUID(event.trace_id)


@pytest.mark.asyncio
async def test_celery_event_handler_publishes_envelope(trace_id):
    task = MagicMock()
    handler = CeleryEventHandler(task, "user-svc")
    user_id = str(uuid.uuid4())

    await handler.send_event(UserEventType.UPDATED.value, user_id)

    task.apply_async.assert_called_once()
    kwargs = task.apply_async.call_args.kwargs
    assert kwargs["queue"] == "user-svc"
    [envelope] = kwargs["args"]
    assert envelope["trace_id"] == trace_id
    assert envelope["event_type"] == "UserUpdated"
    assert envelope["payload"] == user_id


@pytest.mark.asyncio
async def test_celery_event_handler_propagates_broker_errors():
    task = MagicMock()
    task.apply_async.side_effect = ConnectionError("broker unreachable")
    handler = CeleryEventHandler(task, "user-svc")

    with pytest.raises(ConnectionError):
        await handler.send_event("UserCreated", "id")


@pytest.mark.asyncio
async def test_celery_event_handler_publishes_off_the_event_loop():
    loop_thread = threading.get_ident()
    publish_threads = []
    task = MagicMock()
    task.apply_async.side_effect = lambda *a, **kw: publish_threads.append(threading.get_ident())
    handler = CeleryEventHandler(task, "user-svc")

    await handler.send_event("UserCreated", "id")

    assert len(publish_threads) == 1
    assert publish_threads[0] != loop_thread


def test_handle_user_event_consumes_envelope():
    envelope = build_event("UserCreated", "id").model_dump(mode="json")
    assert handle_user_event(envelope) == envelope
