"""
Celery application - event bus transport over RabbitMQ.
Design: The API only publishes; a worker consumes user lifecycle events.
"""

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "user_svc",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.queue.tasks"],
)

# Events are JSON envelopes routed to a single topic queue
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_ignore_result=True,
    task_default_queue=settings.event_topic,
    task_time_limit=60,
    worker_prefetch_multiplier=1,  # Fair distribution
    broker_connection_retry_on_startup=True,
)
