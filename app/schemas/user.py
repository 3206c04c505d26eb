"""User request/response schemas - API contract and validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    nick_name: str = Field(..., min_length=1)
    email: EmailStr
    country: str = Field(..., min_length=2, max_length=2, description="2-letter ISO country code")


class UserCreate(UserBase):
    # bcrypt accepts max 72 bytes; longer passwords would be truncated. Validate here for a clear 400.
    password: str = Field(..., min_length=8, max_length=72)


class UserUpdate(BaseModel):
    """Partial update: only fields that are set (non-null) are applied."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    nick_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    password: Optional[str] = Field(None, min_length=8, max_length=72)


class UserResponse(UserBase):
    """Never carries the password hash."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
