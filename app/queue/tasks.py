"""
Celery tasks - consumers of user lifecycle events.
Stands in for a downstream service subscribed to the user topic.
"""

import json
import logging

from app.queue.celery_app import celery_app

logger = logging.getLogger(__name__)

USER_EVENT_TASK = "users.handle_event"


@celery_app.task(name=USER_EVENT_TASK)
def handle_user_event(event: dict) -> dict:
    """Log a received event envelope and hand it back (visible with a result backend)."""
    logger.info("received event: %s", json.dumps(event, sort_keys=True))
    return event

