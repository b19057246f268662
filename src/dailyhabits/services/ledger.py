"""Habit ledger: one user's habits, streaks and the daily completion rule.

Streak rules:

* completing a habit whose last completion was yesterday extends the streak;
  any longer gap restarts it at 1
* completing twice on the same date changes nothing
* an explicit un-check of today's completion takes one day off the streak
  (never below 0) and restores the previous completion date
* the reset sweep only clears ``completed_today``; a missed day is noticed by
  the next completion, there is no separate decay step

Every mutation is persisted before it is applied to the in-memory collection,
so a ``PersistenceError`` leaves the ledger exactly as it was.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Callable, Iterator, Optional

from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Habit, new_habit_id

Clock = Callable[[], date]

logger = get_logger("services.ledger")


class HabitLedger:
    """Owns the habit collection for a single user."""

    def __init__(
        self,
        repository: HabitRepository,
        *,
        user_id: str,
        clock: Clock = date.today,
    ) -> None:
        self.repository = repository
        self.user_id = user_id
        self.clock = clock
        self._habits: dict[str, Habit] = {}
        self._loaded = False
        self._lock = threading.RLock()
        self._habit_locks: dict[str, threading.Lock] = {}

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def today(self) -> date:
        return self.clock()

    def load(self) -> list[Habit]:
        """(Re)read the collection from storage."""

        with self._lock:
            habits = self.repository.list(user_id=self.user_id)
            self._habits = {habit.id: habit for habit in habits}
            self._loaded = True
            logger.debug("Loaded habits", extra={"user_id": self.user_id, "count": len(habits)})
            return self.habits

    def _ensure_loaded(self) -> None:
        with self._lock:
            if not self._loaded:
                self.load()

    @property
    def habits(self) -> list[Habit]:
        """Detached copies of every habit, in creation order."""

        self._ensure_loaded()
        with self._lock:
            return [habit.clone() for habit in self._habits.values()]

    def get(self, habit_id: str) -> Optional[Habit]:
        self._ensure_loaded()
        with self._lock:
            habit = self._habits.get(habit_id)
            return habit.clone() if habit else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add(self, name: str) -> Optional[Habit]:
        """Create a habit; a blank name is ignored and returns None."""

        label = (name or "").strip()
        if not label:
            logger.debug("Ignoring habit with blank name", extra={"user_id": self.user_id})
            return None

        habit = Habit(
            id=new_habit_id(),
            user_id=self.user_id,
            name=label,
            streak=0,
            completed_today=False,
            created_date=self.today(),
            last_completed_date=None,
        )
        self._ensure_loaded()
        with self._lock:
            stored = self.repository.upsert(habit, user_id=self.user_id)
            self._habits[stored.id] = stored
        logger.info("Habit added", extra={"user_id": self.user_id, "habit_id": stored.id})
        return stored.clone()

    def toggle_completion(self, habit_id: str) -> Optional[Habit]:
        """Mark a habit done for today.

        Returns the resulting habit, or None when the id is unknown. Repeating
        the call on the same date returns the habit unchanged.
        """

        with self._serialized(habit_id):
            current = self._current(habit_id)
            if current is None:
                return None

            today = self.today()
            if current.last_completed_date == today:
                return current.clone()

            previous = current.last_completed_date
            if previous == today - timedelta(days=1):
                streak = current.streak + 1
            else:
                streak = 1

            updated = current.clone(
                completed_today=True,
                streak=streak,
                last_completed_date=today,
                previous_completed_date=previous,
            )
            stored = self._commit(updated)
        logger.info(
            "Habit completed",
            extra={"user_id": self.user_id, "habit_id": habit_id, "streak": stored.streak},
        )
        return stored

    def uncheck(self, habit_id: str) -> Optional[Habit]:
        """Undo today's completion: streak minus one, previous completion date restored."""

        with self._serialized(habit_id):
            current = self._current(habit_id)
            if current is None:
                return None
            if current.last_completed_date != self.today():
                return current.clone()

            updated = current.clone(
                completed_today=False,
                streak=max(0, current.streak - 1),
                last_completed_date=current.previous_completed_date,
                previous_completed_date=None,
            )
            stored = self._commit(updated)
        logger.info(
            "Habit unchecked",
            extra={"user_id": self.user_id, "habit_id": habit_id, "streak": stored.streak},
        )
        return stored

    def set_completion(self, habit_id: str, completed: bool) -> Optional[Habit]:
        """Complete or un-check depending on the requested target state."""

        if completed:
            return self.toggle_completion(habit_id)
        return self.uncheck(habit_id)

    def rename(self, habit_id: str, name: str) -> Optional[Habit]:
        label = (name or "").strip()
        with self._serialized(habit_id):
            current = self._current(habit_id)
            if current is None or not label:
                return current.clone() if current else None
            if label == current.name:
                return current.clone()
            return self._commit(current.clone(name=label))

    def delete(self, habit_id: str) -> bool:
        """Remove a habit; returns False when the id was unknown."""

        with self._serialized(habit_id):
            if self._current(habit_id) is None:
                return False
            self.repository.delete(habit_id, user_id=self.user_id)
            with self._lock:
                self._habits.pop(habit_id, None)
                self._habit_locks.pop(habit_id, None)
        logger.info("Habit deleted", extra={"user_id": self.user_id, "habit_id": habit_id})
        return True

    def reset_daily_if_needed(self) -> int:
        """Clear ``completed_today`` on habits not completed today.

        Returns the number of habits that were cleared. Streaks are untouched.
        """

        today = self.today()
        cleared = 0
        for habit in self.habits:
            if not habit.completed_today or habit.last_completed_date == today:
                continue
            with self._serialized(habit.id):
                current = self._current(habit.id)
                if current is None or current.last_completed_date == today:
                    continue
                self._commit(current.clone(completed_today=False))
                cleared += 1
        if cleared:
            logger.info(
                "Daily reset cleared completions",
                extra={"user_id": self.user_id, "cleared": cleared, "date": today.isoformat()},
            )
        return cleared

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @contextmanager
    def _serialized(self, habit_id: str) -> Iterator[None]:
        """Hold the per-habit lock so read-modify-write cycles never interleave.

        Unknown ids get no lock; callers find nothing to change for them.
        """

        self._ensure_loaded()
        with self._lock:
            if habit_id in self._habits:
                lock = self._habit_locks.setdefault(habit_id, threading.Lock())
            else:
                lock = None
        if lock is None:
            yield
            return
        with lock:
            yield

    def _current(self, habit_id: str) -> Optional[Habit]:
        self._ensure_loaded()
        with self._lock:
            return self._habits.get(habit_id)

    def _commit(self, updated: Habit) -> Habit:
        stored = self.repository.upsert(updated, user_id=self.user_id)
        with self._lock:
            self._habits[stored.id] = stored
        return stored.clone()


__all__ = ["Clock", "HabitLedger"]
