"""Repository protocol definitions for domain layer."""

from .daily_note import DailyNoteRepository
from .habit import HabitRepository
from .progress import ProgressRepository
from .reflection import ReflectionRepository

__all__ = [
    "DailyNoteRepository",
    "HabitRepository",
    "ProgressRepository",
    "ReflectionRepository",
]
