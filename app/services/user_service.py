"""
User service - business logic for the user resource.
Orchestrates repository, password hashing and event emission; keeps
controllers thin. Depends on abstractions, so it is easy to test with mocks.
"""

import logging
import math
import uuid

from app.core.exceptions import EventPublishError
from app.core.query import QuerySpec
from app.core.security import hash_password
from app.db.models.user import User
from app.queue.events import UserEventType
from app.schemas.pagination import PaginationResponse
from app.schemas.user import UserCreate, UserUpdate
from app.services.interfaces import EventHandler, UserRepositoryInterface

logger = logging.getLogger(__name__)


class UserService:
    """Handles all user use cases: create, update, delete, get and list."""

    def __init__(self, user_repo: UserRepositoryInterface, event_handler: EventHandler):
        self.user_repo = user_repo
        self.event_handler = event_handler

    async def _send_event(self, event_type: UserEventType, user_id: uuid.UUID) -> None:
        # The mutation is already committed; report the failure, don't undo it
        try:
            await self.event_handler.send_event(event_type.value, str(user_id))
        except Exception as exc:
            logger.error("failed to send %s event for user %s", event_type.value, user_id)
            raise EventPublishError("fail sending event") from exc

    async def create_user(self, data: UserCreate) -> User:
        """Assign a new id, hash the password, persist, then emit UserCreated."""
        user = User(
            id=uuid.uuid4(),
            first_name=data.first_name,
            last_name=data.last_name,
            nick_name=data.nick_name,
            email=data.email,
            country=data.country,
            password=hash_password(data.password),
        )
        logger.info("creating new user %s", user.id)

        user = await self.user_repo.create_user(user)
        await self._send_event(UserEventType.CREATED, user.id)
        return user

    async def get_user(self, user_id: uuid.UUID) -> User:
        return await self.user_repo.get_user_by_id(user_id)

    async def update_user(self, user_id: uuid.UUID, data: UserUpdate) -> User:
        """
        Partial update. Only fields set in data change; a new password is re-hashed.
        NotFoundError from the lookup propagates before anything is written.
        """
        logger.info("updating user %s", user_id)
        await self.user_repo.get_user_by_id(user_id)

        changes = data.model_dump(exclude_none=True)
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])

        user = await self.user_repo.update_user(user_id, changes)
        await self._send_event(UserEventType.UPDATED, user.id)
        return user

    async def delete_user(self, user_id: uuid.UUID) -> None:
        """Soft delete. Deleting a missing user is not an error."""
        logger.info("deleting user %s", user_id)
        await self.user_repo.delete_user(user_id)
        await self._send_event(UserEventType.DELETED, user_id)

    async def list_users(self, spec: QuerySpec) -> PaginationResponse[User]:
        """
        Count first, then fetch the page only if it can hold rows.
        An empty result or a page past the last one returns empty data
        without querying rows.
        """
        logger.info("listing users with query %s", spec.model_dump())
        total = await self.user_repo.count_users(spec.filters, sort_by=spec.sort_by)
        total_pages = math.ceil(total / spec.page_size)

        res = PaginationResponse[User](
            page=spec.page,
            page_size=spec.page_size,
            sort_by=spec.sort_by,
            sort_order=spec.sort_order,
            filters=spec.filters,
            total_records=total,
            data=[],
        )
        if total == 0 or spec.page > total_pages:
            return res

        res.data = await self.user_repo.list_users(spec)
        return res
