"""Per-day completion summaries."""

from __future__ import annotations

import datetime as dt
from typing import Any, ClassVar

from sqlmodel import Field, SQLModel


def completion_percentage(completed: int, total: int) -> int:
    """Return the rounded (half-up) completion percentage, 0 when there are no habits."""

    if total <= 0:
        return 0
    # Integer half-up rounding; round() would send 0.5 to the even neighbour
    return (completed * 200 + total) // (total * 2)


class DailyProgress(SQLModel, table=True):
    """Completed / total habit counts for one user on one calendar date."""

    __tablename__: ClassVar[str] = "daily_progress"

    user_id: str = Field(foreign_key="user.id", primary_key=True, max_length=32)
    date: dt.date = Field(primary_key=True, index=True)
    completed_count: int = Field(default=0, nullable=False)
    total_habits: int = Field(default=0, nullable=False)
    completion_percentage: int = Field(default=0, nullable=False)

    @classmethod
    def compute(cls, *, user_id: str, day: dt.date, completed: int, total: int) -> "DailyProgress":
        return cls(
            user_id=user_id,
            date=day,
            completed_count=completed,
            total_habits=total,
            completion_percentage=completion_percentage(completed, total),
        )

    @classmethod
    def empty(cls, *, user_id: str, day: dt.date) -> "DailyProgress":
        """Zero record for a date with no stored summary."""

        return cls(user_id=user_id, date=day)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "completedCount": self.completed_count,
            "totalHabits": self.total_habits,
            "completionPercentage": self.completion_percentage,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], *, user_id: str) -> "DailyProgress":
        return cls(
            user_id=user_id,
            date=dt.date.fromisoformat(str(payload["date"])),
            completed_count=int(payload.get("completedCount", 0) or 0),
            total_habits=int(payload.get("totalHabits", 0) or 0),
            completion_percentage=int(payload.get("completionPercentage", 0) or 0),
        )
