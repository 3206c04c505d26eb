"""
Contracts the user service depends on.

UserService talks to these protocols, not to the SQLAlchemy repository or
the Celery publisher, so tests can inject mocks.
"""

import uuid
from typing import Any, Protocol, runtime_checkable

from app.core.query import QuerySpec
from app.db.models.user import User


@runtime_checkable
class UserRepositoryInterface(Protocol):
    """Storage-facing user operations."""

    async def create_user(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            ConflictError: if the email is already used by a live user
            InternalError: on any other storage failure
        """
        ...

    async def get_user_by_id(self, id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError: if no live user has this id
        """
        ...

    async def update_user(self, id: uuid.UUID, fields: dict[str, Any]) -> User:
        """
        Apply fields to the live user and return the re-read row.

        Raises:
            NotFoundError: if no live user has this id
            ConflictError: if the change violates email uniqueness
        """
        ...

    async def delete_user(self, id: uuid.UUID) -> None:
        """Soft delete; succeeds when the user is missing or already deleted."""
        ...

    async def list_users(self, spec: QuerySpec) -> list[User]:
        """Filtered, ordered, paginated live users. Empty list when none match."""
        ...

    async def count_users(self, filters: dict[str, list[str]], sort_by: str | None = None) -> int:
        """
        Number of live users matching filters, ignoring pagination.

        Raises:
            WrongInputError: if a filter or the given sort_by is not a queryable field
        """
        ...


@runtime_checkable
class EventHandler(Protocol):
    async def send_event(self, event_type: str, payload: Any) -> None:
        """Publish one event. Raises on transport failure."""
        ...
