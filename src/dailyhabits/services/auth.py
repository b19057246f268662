"""Authentication and user management services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import select

from ..infra.database import SessionFactory, storage_errors
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger("services.auth")

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 8


def _normalize_username(username: str) -> str:
    return (username or "").strip().lower()


def get_user(user_id: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by id."""
    with storage_errors("auth.get_user"), session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_username(username: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by username."""
    username = _normalize_username(username)
    with storage_errors("auth.get_user_by_username"), session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user:
            session.expunge(user)
        return user


def list_users(session_factory: SessionFactory) -> list[User]:
    """Return all users ordered by creation time."""
    with storage_errors("auth.list_users"), session_factory() as session:
        users = list(session.exec(select(User).order_by(User.created_at)).all())
        session.expunge_all()
    return users


def create_user(*, username: str, password: str, session_factory: SessionFactory) -> User:
    """Create a new user with hashed password."""

    username = _normalize_username(username)
    if not username:
        raise ValueError("Username cannot be empty")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    password_hash = _hasher.hash(password)
    with storage_errors("auth.create_user"), session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            raise ValueError("Username already exists")
        user = User(username=username, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    logger.info("User created", extra={"user_id": user.id})
    return user


def authenticate(*, username: str, password: str, session_factory: SessionFactory) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = _normalize_username(username)
    if not username:
        return None
    with storage_errors("auth.authenticate"), session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Rejected sign-in", extra={"user_id": user.id})
            return None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user
