"""
User model - the persisted user resource with soft-delete support.
"""

import uuid
from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import CheckConstraint, DateTime, Index, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """User entity. A non-null deleted_at hides the row from normal reads."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("length(country) = 2", name="country_length"),
        # Email is unique among live users only, so a soft-deleted address can be reused
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    nick_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    # Public field name -> column, used for filtering and sorting
    QUERYABLE_COLUMNS: ClassVar[dict] = {}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


User.QUERYABLE_COLUMNS = {
    "id": User.id,
    "first_name": User.first_name,
    "last_name": User.last_name,
    "nick_name": User.nick_name,
    "email": User.email,
    "password": User.password,
    "country": User.country,
    "created_at": User.created_at,
    "updated_at": User.updated_at,
}
