"""Unit tests for the SQLModel repository implementations."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from dailyhabits.errors import PersistenceError
from dailyhabits.infra.repositories import (
    SQLModelDailyNoteRepository,
    SQLModelHabitRepository,
    SQLModelProgressRepository,
    SQLModelReflectionRepository,
)
from dailyhabits.models import DailyNote, DailyProgress, Habit, Reflection
from dailyhabits.services.ledger import HabitLedger

DAY = date(2025, 3, 12)


class TestHabitRepository:
    def test_upsert_inserts_then_updates(self, session_factory, user):
        repo = SQLModelHabitRepository(session_factory)
        habit = Habit(user_id=user.id, name="Read", created_date=DAY)

        repo.upsert(habit, user_id=user.id)
        repo.upsert(habit.clone(streak=3, completed_today=True, last_completed_date=DAY), user_id=user.id)

        rows = repo.list(user_id=user.id)
        assert len(rows) == 1
        assert rows[0].streak == 3
        assert rows[0].completed_today is True
        assert rows[0].last_completed_date == DAY

    def test_upsert_does_not_attach_callers_object(self, session_factory, user):
        repo = SQLModelHabitRepository(session_factory)
        habit = Habit(user_id=user.id, name="Read", created_date=DAY)

        stored = repo.upsert(habit, user_id=user.id)
        habit.streak = 42

        assert stored is not habit
        assert repo.list(user_id=user.id)[0].streak == 0

    def test_list_is_scoped_to_user(self, session_factory, user):
        repo = SQLModelHabitRepository(session_factory)
        repo.upsert(Habit(user_id=user.id, name="Mine", created_date=DAY), user_id=user.id)

        assert repo.list(user_id="someone-else") == []

    def test_list_orders_by_creation_date(self, session_factory, user):
        repo = SQLModelHabitRepository(session_factory)
        repo.upsert(Habit(user_id=user.id, name="Newer", created_date=DAY), user_id=user.id)
        repo.upsert(
            Habit(user_id=user.id, name="Older", created_date=DAY - timedelta(days=3)),
            user_id=user.id,
        )

        assert [h.name for h in repo.list(user_id=user.id)] == ["Older", "Newer"]

    def test_delete(self, session_factory, user):
        repo = SQLModelHabitRepository(session_factory)
        stored = repo.upsert(Habit(user_id=user.id, name="Gone", created_date=DAY), user_id=user.id)

        repo.delete(stored.id, user_id=user.id)
        repo.delete("missing", user_id=user.id)

        assert repo.list(user_id=user.id) == []

    def test_database_errors_become_persistence_errors(self, user):
        def broken_factory():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        repo = SQLModelHabitRepository(broken_factory)

        with pytest.raises(PersistenceError) as excinfo:
            repo.list(user_id=user.id)
        assert excinfo.value.operation == "habit.list"


class TestProgressRepository:
    def test_upsert_and_range(self, session_factory, user):
        repo = SQLModelProgressRepository(session_factory)
        for offset in range(4):
            day = DAY - timedelta(days=offset)
            repo.upsert(DailyProgress.compute(user_id=user.id, day=day, completed=1, total=4), user_id=user.id)
        repo.upsert(DailyProgress.compute(user_id=user.id, day=DAY, completed=4, total=4), user_id=user.id)

        assert repo.get(DAY, user_id=user.id).completion_percentage == 100
        assert repo.get(DAY + timedelta(days=1), user_id=user.id) is None
        window = repo.list_range(DAY - timedelta(days=2), DAY, user_id=user.id)
        assert [p.date for p in window] == [DAY - timedelta(days=2), DAY - timedelta(days=1), DAY]


class TestReflectionRepository:
    def test_round_trip_and_recent(self, session_factory, user):
        repo = SQLModelReflectionRepository(session_factory)
        for offset in range(3):
            repo.upsert(
                Reflection(
                    user_id=user.id,
                    date=DAY - timedelta(days=offset),
                    responses=[{"question": "q", "answer": f"a{offset}"}],
                ),
                user_id=user.id,
            )

        assert repo.get(DAY, user_id=user.id).responses == [{"question": "q", "answer": "a0"}]
        assert [r.date for r in repo.list_recent(user_id=user.id, limit=2)] == [
            DAY,
            DAY - timedelta(days=1),
        ]


class TestDailyNoteRepository:
    def test_upsert_overwrites_same_day(self, session_factory, user):
        repo = SQLModelDailyNoteRepository(session_factory)
        repo.upsert(DailyNote(user_id=user.id, date=DAY, focus="Ship"), user_id=user.id)
        repo.upsert(DailyNote(user_id=user.id, date=DAY, focus="Ship it", note="go"), user_id=user.id)

        stored = repo.get(DAY, user_id=user.id)
        assert (stored.focus, stored.note) == ("Ship it", "go")
        assert repo.get(DAY - timedelta(days=1), user_id=user.id) is None
        assert repo.get(DAY, user_id="someone-else") is None


def test_ledger_on_sqlmodel_backing(session_factory, user, clock):
    ledger = HabitLedger(SQLModelHabitRepository(session_factory), user_id=user.id, clock=clock)
    habit = ledger.add("Walk")
    ledger.toggle_completion(habit.id)
    clock.advance()
    ledger.reset_daily_if_needed()
    ledger.toggle_completion(habit.id)

    reloaded = HabitLedger(SQLModelHabitRepository(session_factory), user_id=user.id, clock=clock)
    stored = reloaded.get(habit.id)
    assert stored.streak == 2
    assert stored.previous_completed_date == clock() - timedelta(days=1)
