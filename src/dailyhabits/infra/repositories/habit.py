"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from sqlmodel import select

from ...models.habit import Habit
from ..database import SessionFactory, storage_errors


class SQLModelHabitRepository:
    """Stores each habit as one row (the per-document backing)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list(self, *, user_id: str) -> list[Habit]:
        with storage_errors("habit.list"), self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_date, Habit.name)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert(self, habit: Habit, *, user_id: str) -> Habit:
        # merge() copies state onto a session-owned instance; the caller's object stays detached
        with storage_errors("habit.upsert"), self.session_factory() as session:
            row = session.merge(habit.clone(user_id=user_id))
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def delete(self, habit_id: str, *, user_id: str) -> None:
        with storage_errors("habit.delete"), self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit:
                session.delete(habit)
                session.commit()
