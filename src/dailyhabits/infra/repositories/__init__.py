"""Concrete repository implementations using SQLModel."""

from .daily_note import SQLModelDailyNoteRepository
from .habit import SQLModelHabitRepository
from .progress import SQLModelProgressRepository
from .reflection import SQLModelReflectionRepository

__all__ = [
    "SQLModelDailyNoteRepository",
    "SQLModelHabitRepository",
    "SQLModelProgressRepository",
    "SQLModelReflectionRepository",
]
