"""Pytest configuration and shared fixtures for DailyHabits tests.

Provides a throwaway SQLite database, in-memory repositories with failure
injection, a controllable clock, and a Flask test client with a signed-in user.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

from dailyhabits import create_app
from dailyhabits.config import TestConfig
from dailyhabits.errors import PersistenceError
from dailyhabits.infra.database import create_session_factory
from dailyhabits.models import DailyNote, DailyProgress, Habit, Reflection, User
from dailyhabits.services.ledger import HabitLedger
from dailyhabits.services.progress import DailyProgressAggregator

TODAY = date(2025, 3, 12)


class FakeClock:
    """Callable clock whose date tests can move forward."""

    def __init__(self, today: date = TODAY) -> None:
        self.current = today

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> date:
        self.current += timedelta(days=days)
        return self.current


class InMemoryHabitRepository:
    """Habit repository double; set ``fail_on`` to make an operation raise."""

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Habit]] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise PersistenceError(f"habit.{operation}", "injected failure")

    def list(self, *, user_id: str) -> list[Habit]:
        self._check("list")
        habits = [h.clone() for h in self.rows.get(user_id, {}).values()]
        return sorted(habits, key=lambda h: (h.created_date, h.name))

    def upsert(self, habit: Habit, *, user_id: str) -> Habit:
        self._check("upsert")
        stored = habit.clone(user_id=user_id)
        self.rows.setdefault(user_id, {})[stored.id] = stored
        return stored.clone()

    def delete(self, habit_id: str, *, user_id: str) -> None:
        self._check("delete")
        self.rows.get(user_id, {}).pop(habit_id, None)

    def seed(self, user_id: str, **fields) -> Habit:
        habit = Habit(user_id=user_id, **fields)
        self.rows.setdefault(user_id, {})[habit.id] = habit
        return habit.clone()


class InMemoryProgressRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, date], DailyProgress] = {}
        self.fail = False

    def get(self, day: date, *, user_id: str) -> Optional[DailyProgress]:
        return self.rows.get((user_id, day))

    def list_range(self, start: date, end: date, *, user_id: str) -> list[DailyProgress]:
        return sorted(
            (r for (uid, day), r in self.rows.items() if uid == user_id and start <= day <= end),
            key=lambda r: r.date,
        )

    def upsert(self, record: DailyProgress, *, user_id: str) -> DailyProgress:
        if self.fail:
            raise PersistenceError("progress.upsert", "injected failure")
        stored = DailyProgress(**{**record.model_dump(), "user_id": user_id})
        self.rows[(user_id, stored.date)] = stored
        return stored


class InMemoryReflectionRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, date], Reflection] = {}

    def get(self, day: date, *, user_id: str) -> Optional[Reflection]:
        return self.rows.get((user_id, day))

    def list_recent(self, *, user_id: str, limit: int) -> list[Reflection]:
        mine = [r for (uid, _), r in self.rows.items() if uid == user_id]
        return sorted(mine, key=lambda r: r.date, reverse=True)[:limit]

    def upsert(self, reflection: Reflection, *, user_id: str) -> Reflection:
        self.rows[(user_id, reflection.date)] = reflection
        return reflection


class InMemoryDailyNoteRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, date], DailyNote] = {}

    def get(self, day: date, *, user_id: str) -> Optional[DailyNote]:
        return self.rows.get((user_id, day))

    def upsert(self, note: DailyNote, *, user_id: str) -> DailyNote:
        self.rows[(user_id, note.date)] = note
        return note


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def habit_repo() -> InMemoryHabitRepository:
    return InMemoryHabitRepository()


@pytest.fixture
def progress_repo() -> InMemoryProgressRepository:
    return InMemoryProgressRepository()


@pytest.fixture
def reflection_repo() -> InMemoryReflectionRepository:
    return InMemoryReflectionRepository()


@pytest.fixture
def daily_note_repo() -> InMemoryDailyNoteRepository:
    return InMemoryDailyNoteRepository()


@pytest.fixture
def ledger(habit_repo, clock) -> HabitLedger:
    return HabitLedger(habit_repo, user_id="user-1", clock=clock)


@pytest.fixture
def aggregator(ledger, progress_repo) -> DailyProgressAggregator:
    return DailyProgressAggregator(ledger, progress_repo)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def user(db_engine) -> User:
    """Persisted user that owns rows created through the SQLModel repositories."""

    with Session(db_engine, expire_on_commit=False) as session:
        row = User(username="tester", password_hash="dummy-hash")
        session.add(row)
        session.commit()
        session.refresh(row)
        return row


# =============================================================================
# Flask fixtures
# =============================================================================


@pytest.fixture(params=["sqlmodel", "json"])
def storage_backend(request) -> str:
    return request.param


@pytest.fixture
def app(tmp_path, monkeypatch, clock, storage_backend):
    monkeypatch.setenv("DAILYHABITS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DAILYHABITS_STORAGE", storage_backend)
    monkeypatch.delenv("DAILYHABITS_DATABASE_URL", raising=False)
    application = create_app(config=TestConfig(), clock=clock)
    application.config.update(TESTING=True)
    return application


@pytest.fixture
def anon_client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def client(anon_client):
    """Test client signed in as a freshly registered user."""

    response = anon_client.post(
        "/auth/register", json={"username": "ada", "password": "correct horse"}
    )
    assert response.status_code == 201
    return anon_client
