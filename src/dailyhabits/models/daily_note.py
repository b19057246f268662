"""Per-day focus and note shown alongside the habit list."""

from __future__ import annotations

import datetime as dt
from typing import Any, ClassVar

from sqlmodel import Field, SQLModel

FOCUS_MAX_LENGTH = 200
NOTE_MAX_LENGTH = 1000


class DailyNote(SQLModel, table=True):
    """Free-text focus and note a user writes for one calendar date."""

    __tablename__: ClassVar[str] = "daily_note"

    user_id: str = Field(foreign_key="user.id", primary_key=True, max_length=32)
    date: dt.date = Field(primary_key=True, index=True)
    focus: str = Field(default="", nullable=False, max_length=FOCUS_MAX_LENGTH)
    note: str = Field(default="", nullable=False, max_length=NOTE_MAX_LENGTH)

    @property
    def is_empty(self) -> bool:
        return not (self.focus or self.note)

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "focus": self.focus, "note": self.note}

    @classmethod
    def from_dict(cls, payload: dict[str, Any], *, user_id: str) -> "DailyNote":
        return cls(
            user_id=user_id,
            date=dt.date.fromisoformat(str(payload["date"])),
            focus=str(payload.get("focus") or ""),
            note=str(payload.get("note") or ""),
        )
