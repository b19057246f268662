"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date
from typing import Any, ClassVar, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


def new_habit_id() -> str:
    """Return a fresh opaque habit identifier."""

    return uuid4().hex


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class Habit(SQLModel, table=True):
    """A user-defined habit with its running streak counter.

    ``completed_today`` mirrors ``last_completed_date == today``; the ledger's
    reset sweep clears it once the date rolls over.
    """

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=new_habit_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True, max_length=32)
    name: str = Field(nullable=False, max_length=100)
    streak: int = Field(default=0, nullable=False)
    completed_today: bool = Field(default=False, nullable=False)
    created_date: date = Field(default_factory=date.today, nullable=False)
    last_completed_date: Optional[date] = Field(default=None)
    # Completion before last_completed_date, so an un-check can restore it
    previous_completed_date: Optional[date] = Field(default=None)

    def clone(self, **changes: Any) -> "Habit":
        """Return a detached copy with ``changes`` applied."""

        data = self.model_dump()
        data.update(changes)
        return Habit(**data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase document shape used by JSON storage and the API."""

        return {
            "id": self.id,
            "name": self.name,
            "streak": self.streak,
            "completedToday": self.completed_today,
            "createdDate": self.created_date.isoformat(),
            "lastCompletedDate": (
                self.last_completed_date.isoformat() if self.last_completed_date else None
            ),
            "previousCompletedDate": (
                self.previous_completed_date.isoformat() if self.previous_completed_date else None
            ),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], *, user_id: str) -> "Habit":
        """Build a habit from a stored document.

        Raises ``KeyError`` or ``ValueError`` when ``id`` or ``createdDate`` is
        missing or unparseable.
        """

        habit_id = str(payload["id"] or "")
        created = _parse_date(payload["createdDate"])
        if not habit_id or created is None:
            raise ValueError("Stored habit needs an id and a createdDate")
        return cls(
            id=habit_id,
            user_id=user_id,
            name=str(payload.get("name", "")),
            streak=max(0, int(payload.get("streak", 0) or 0)),
            completed_today=bool(payload.get("completedToday", False)),
            created_date=created,
            last_completed_date=_parse_date(payload.get("lastCompletedDate")),
            previous_completed_date=_parse_date(payload.get("previousCompletedDate")),
        )
