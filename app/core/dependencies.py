"""
FastAPI dependencies - injection for DB session, event bus and services (SOLID: Dependency Inversion).
Tests override get_event_handler to avoid a broker.
"""

from typing import Annotated

from fastapi import Depends

from app.config import get_settings
from app.db.repositories.user_repository import UserRepository
from app.db.session import DbSession
from app.queue.events import CeleryEventHandler
from app.queue.tasks import handle_user_event
from app.services.interfaces import EventHandler
from app.services.user_service import UserService


def get_event_handler() -> EventHandler:
    return CeleryEventHandler(handle_user_event, get_settings().event_topic)


def get_user_service(
    session: DbSession,
    event_handler: Annotated[EventHandler, Depends(get_event_handler)],
) -> UserService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return UserService(UserRepository(session), event_handler)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
