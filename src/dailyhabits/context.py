"""Application context for dependency injection."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .config import BaseConfig
from .domain.repositories import (
    DailyNoteRepository,
    HabitRepository,
    ProgressRepository,
    ReflectionRepository,
)
from .infra.database import SessionFactory, bootstrap_database
from .infra.json_store import (
    JsonDailyNoteRepository,
    JsonDocumentStore,
    JsonHabitRepository,
    JsonProgressRepository,
    JsonReflectionRepository,
)
from .infra.repositories import (
    SQLModelDailyNoteRepository,
    SQLModelHabitRepository,
    SQLModelProgressRepository,
    SQLModelReflectionRepository,
)
from .logging_config import get_logger
from .services.daily_notes import DailyNotebook
from .services.ledger import Clock, HabitLedger
from .services.progress import DailyProgressAggregator
from .services.reflections import ReflectionJournal

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with storage and per-user services.

    One ledger is kept per user id so concurrent requests for the same user
    share its in-memory collection and per-habit locks.
    """

    config: BaseConfig
    session_factory: SessionFactory

    habit_repo: HabitRepository
    progress_repo: ProgressRepository
    reflection_repo: ReflectionRepository
    daily_note_repo: DailyNoteRepository

    clock: Clock = date.today

    _ledgers: dict[str, HabitLedger] = field(default_factory=dict, repr=False)
    _ledgers_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def ledger_for(self, user_id: str) -> HabitLedger:
        with self._ledgers_lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                ledger = HabitLedger(self.habit_repo, user_id=user_id, clock=self.clock)
                self._ledgers[user_id] = ledger
            return ledger

    def aggregator_for(self, user_id: str) -> DailyProgressAggregator:
        return DailyProgressAggregator(self.ledger_for(user_id), self.progress_repo, clock=self.clock)

    def journal_for(self, user_id: str) -> ReflectionJournal:
        return ReflectionJournal(self.reflection_repo, user_id=user_id, clock=self.clock)

    def notebook_for(self, user_id: str) -> DailyNotebook:
        return DailyNotebook(self.daily_note_repo, user_id=user_id, clock=self.clock)

    def forget_user(self, user_id: str) -> None:
        """Drop the cached ledger, e.g. after sign-out."""

        with self._ledgers_lock:
            self._ledgers.pop(user_id, None)


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Clock = date.today,
) -> AppContext:
    """Create the database, pick the configured storage backend and wire repositories."""

    if config is None:
        config = BaseConfig()

    # Users always live in the database; habit data follows STORAGE_BACKEND
    _engine, session_factory = bootstrap_database(config)

    if config.STORAGE_BACKEND == "json":
        store = JsonDocumentStore(config.json_store_dir)
        habit_repo: HabitRepository = JsonHabitRepository(store)
        progress_repo: ProgressRepository = JsonProgressRepository(store)
        reflection_repo: ReflectionRepository = JsonReflectionRepository(store)
        daily_note_repo: DailyNoteRepository = JsonDailyNoteRepository(store)
    else:
        habit_repo = SQLModelHabitRepository(session_factory)
        progress_repo = SQLModelProgressRepository(session_factory)
        reflection_repo = SQLModelReflectionRepository(session_factory)
        daily_note_repo = SQLModelDailyNoteRepository(session_factory)

    logger.info("Application context ready", extra={"storage": config.STORAGE_BACKEND})

    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=habit_repo,
        progress_repo=progress_repo,
        reflection_repo=reflection_repo,
        daily_note_repo=daily_note_repo,
        clock=clock,
    )
