"""SQLModel table exports."""

from .daily_note import DailyNote
from .habit import Habit
from .progress import DailyProgress
from .reflection import Reflection
from .user import User

__all__ = [
    "DailyNote",
    "DailyProgress",
    "Habit",
    "Reflection",
    "User",
]
