"""Habit repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Per-user habit storage.

    Implementations raise ``PersistenceError`` when the backing store fails;
    they never return partial results.
    """

    def list(self, *, user_id: str) -> list[Habit]:
        """Return every habit owned by the user."""
        ...

    def upsert(self, habit: Habit, *, user_id: str) -> Habit:
        """Insert or replace a habit by id."""
        ...

    def delete(self, habit_id: str, *, user_id: str) -> None:
        """Delete a habit by id; absent ids are ignored."""
        ...
