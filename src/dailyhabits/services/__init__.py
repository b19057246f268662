"""Domain services: habit ledger, progress aggregation, reflections, daily notes and auth."""

from .daily_notes import DailyNotebook
from .ledger import HabitLedger
from .progress import DailyProgressAggregator, WeeklySummary
from .reflections import DEFAULT_PROMPTS, ReflectionJournal

__all__ = [
    "DEFAULT_PROMPTS",
    "DailyNotebook",
    "DailyProgressAggregator",
    "HabitLedger",
    "ReflectionJournal",
    "WeeklySummary",
]
