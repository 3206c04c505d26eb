"""
User repository - all user data access and storage error mapping.

Storage errors are translated here, once: unique violations become
ConflictError, missing rows NotFoundError, anything else InternalError.
Soft-deleted rows are invisible to every read.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import ConflictError, InternalError, NotFoundError
from app.core.query import QuerySpec
from app.db.models.user import User
from app.db.query import apply_filters, apply_query, resolve_sort_column
from app.db.repositories.base_repository import BaseRepository, is_unique_violation

logger = logging.getLogger(__name__)

_live = User.deleted_at.is_(None)


class UserRepository(BaseRepository[User]):
    """SQLAlchemy implementation of UserRepositoryInterface."""

    def __init__(self, session):
        super().__init__(session, User)

    async def create_user(self, user: User) -> User:
        """Insert user; created_at/updated_at come from the database."""
        try:
            async with self._transaction():
                self.session.add(user)
                await self.session.flush()
                await self.session.refresh(user)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ConflictError() from exc
            raise InternalError("failed to create user") from exc
        except SQLAlchemyError as exc:
            raise InternalError("failed to create user") from exc
        return user

    async def get_user_by_id(self, id: uuid.UUID) -> User:
        try:
            result = await self.session.execute(select(User).where(User.id == id, _live))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise InternalError("failed to get user by ID") from exc
        if user is None:
            raise NotFoundError()
        return user

    async def update_user(self, id: uuid.UUID, fields: dict[str, Any]) -> User:
        """Apply a partial update and return the row as re-read in the same transaction."""
        try:
            async with self._transaction():
                if fields:
                    res = await self.session.execute(
                        update(User)
                        .where(User.id == id, _live)
                        .values(**fields)
                        .execution_options(synchronize_session=False)
                    )
                    if res.rowcount == 0:
                        raise NotFoundError()
                result = await self.session.execute(
                    select(User)
                    .where(User.id == id, _live)
                    .execution_options(populate_existing=True)
                )
                user = result.scalar_one_or_none()
                if user is None:
                    raise NotFoundError()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ConflictError() from exc
            raise InternalError("failed to update user") from exc
        except SQLAlchemyError as exc:
            raise InternalError("failed to update user") from exc
        return user

    async def delete_user(self, id: uuid.UUID) -> None:
        """Soft delete. Deleting a missing or already deleted user is a no-op."""
        try:
            async with self._transaction():
                res = await self.session.execute(
                    update(User)
                    .where(User.id == id, _live)
                    .values(deleted_at=func.now())
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            raise InternalError("failed to delete user") from exc
        if res.rowcount == 0:
            logger.debug("delete matched no live user %s", id)

    async def list_users(self, spec: QuerySpec) -> list[User]:
        stmt = apply_query(spec, select(User).where(_live), User.QUERYABLE_COLUMNS)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise InternalError("failed to list users") from exc
        return list(result.scalars().all())

    async def count_users(self, filters: dict[str, list[str]], sort_by: str | None = None) -> int:
        # sort_by is rejected even when no rows get listed
        if sort_by is not None:
            resolve_sort_column(User.QUERYABLE_COLUMNS, sort_by)
        stmt = apply_filters(
            select(func.count()).select_from(User).where(_live),
            User.QUERYABLE_COLUMNS,
            filters or {},
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise InternalError("failed to get count") from exc
        return result.scalar_one()
