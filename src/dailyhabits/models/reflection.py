"""Evening reflection entries."""

from __future__ import annotations

import datetime as dt
from typing import Any, ClassVar

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Reflection(SQLModel, table=True):
    """Free-text answers to the evening prompts for one user on one date.

    ``responses`` is an ordered list of ``{"question": ..., "answer": ...}`` pairs.
    """

    __tablename__: ClassVar[str] = "reflection"

    user_id: str = Field(foreign_key="user.id", primary_key=True, max_length=32)
    date: dt.date = Field(primary_key=True, index=True)
    responses: list[dict[str, str]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    @property
    def answered_count(self) -> int:
        return sum(1 for item in self.responses if item.get("answer", "").strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "responses": [
                {"question": item.get("question", ""), "answer": item.get("answer", "")}
                for item in self.responses
            ],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], *, user_id: str) -> "Reflection":
        responses = [
            {"question": str(item.get("question", "")), "answer": str(item.get("answer", ""))}
            for item in payload.get("responses", [])
            if isinstance(item, dict)
        ]
        return cls(
            user_id=user_id,
            date=dt.date.fromisoformat(str(payload["date"])),
            responses=responses,
        )
