"""User model backing username/password sign-in."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Application user; ``id`` is the opaque key that scopes all stored data."""

    __tablename__: ClassVar[str] = "user"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=32)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None)
