"""Daily progress aggregation and weekly summary statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from ..domain.repositories.progress import ProgressRepository
from ..logging_config import get_logger
from ..models.progress import DailyProgress, completion_percentage
from .ledger import Clock, HabitLedger

logger = get_logger("services.progress")

WEEK_DAYS = 7


@dataclass(slots=True)
class WeeklySummary:
    """Statistics over a window of daily summaries (oldest first)."""

    days: list[DailyProgress]
    average_completion: int
    perfect_days: int
    best_day: Optional[DailyProgress]

    def to_dict(self) -> dict:
        return {
            "days": [day.to_dict() for day in self.days],
            "averageCompletion": self.average_completion,
            "perfectDays": self.perfect_days,
            "bestDay": self.best_day.to_dict() if self.best_day else None,
        }


def summarize_window(days: Sequence[DailyProgress]) -> WeeklySummary:
    """Average completion, count of 100% days and the best day (earliest wins ties)."""

    if not days:
        return WeeklySummary(days=[], average_completion=0, perfect_days=0, best_day=None)

    total = sum(day.completion_percentage for day in days)
    # Rounded mean of the percentages, half-up like completion_percentage
    average = completion_percentage(total, len(days) * 100)

    best = days[0]
    for day in days[1:]:
        if day.completion_percentage > best.completion_percentage:
            best = day

    return WeeklySummary(
        days=list(days),
        average_completion=average,
        perfect_days=sum(1 for day in days if day.completion_percentage == 100),
        best_day=best,
    )


class DailyProgressAggregator:
    """Derives per-day summaries from a ledger and keeps the dated history."""

    def __init__(
        self,
        ledger: HabitLedger,
        repository: ProgressRepository,
        *,
        clock: Clock | None = None,
    ) -> None:
        self.ledger = ledger
        self.repository = repository
        self.clock = clock or ledger.clock

    @property
    def user_id(self) -> str:
        return self.ledger.user_id

    def recompute_today(self) -> DailyProgress:
        """Summarize the ledger's current state and overwrite today's record."""

        habits = self.ledger.habits
        record = DailyProgress.compute(
            user_id=self.user_id,
            day=self.clock(),
            completed=sum(1 for habit in habits if habit.completed_today),
            total=len(habits),
        )
        stored = self.repository.upsert(record, user_id=self.user_id)
        logger.debug(
            "Daily progress recomputed",
            extra={"user_id": self.user_id, "percentage": stored.completion_percentage},
        )
        return stored

    def get_today(self) -> DailyProgress:
        today = self.clock()
        stored = self.repository.get(today, user_id=self.user_id)
        return stored or DailyProgress.empty(user_id=self.user_id, day=today)

    def get_window(self, days: int) -> list[DailyProgress]:
        """Return ``days`` summaries ending today, oldest first, zero-filling gaps."""

        if days < 1:
            raise ValueError("days must be at least 1")

        end = self.clock()
        start = end - timedelta(days=days - 1)
        stored = {
            record.date: record
            for record in self.repository.list_range(start, end, user_id=self.user_id)
        }

        window: list[DailyProgress] = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            window.append(stored.get(day) or DailyProgress.empty(user_id=self.user_id, day=day))
        return window

    def weekly_summary(self, days: int = WEEK_DAYS) -> WeeklySummary:
        return summarize_window(self.get_window(days))

    def correct(self, record: DailyProgress) -> DailyProgress:
        """Overwrite a stored summary for today or an elapsed date.

        The percentage is recomputed from the counts so corrected records stay
        internally consistent.
        """

        if record.date > self.clock():
            raise ValueError("Cannot record progress for a future date")
        if record.completed_count < 0 or record.total_habits < 0:
            raise ValueError("Counts must be non-negative")
        if record.completed_count > record.total_habits:
            raise ValueError("Completed count cannot exceed total habits")

        corrected = DailyProgress.compute(
            user_id=self.user_id,
            day=record.date,
            completed=record.completed_count,
            total=record.total_habits,
        )
        stored = self.repository.upsert(corrected, user_id=self.user_id)
        logger.info(
            "Daily progress corrected",
            extra={"user_id": self.user_id, "date": record.date.isoformat()},
        )
        return stored


__all__ = ["DailyProgressAggregator", "WeeklySummary", "summarize_window", "WEEK_DAYS"]
