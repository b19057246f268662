"""SQLModel implementation of the daily progress repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import select

from ...models.progress import DailyProgress
from ..database import SessionFactory, storage_errors


class SQLModelProgressRepository:
    """Daily summaries keyed by (user_id, date)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, day: date, *, user_id: str) -> Optional[DailyProgress]:
        with storage_errors("progress.get"), self.session_factory() as session:
            obj = session.get(DailyProgress, (user_id, day))
            if obj:
                session.expunge(obj)
            return obj

    def list_range(self, start: date, end: date, *, user_id: str) -> list[DailyProgress]:
        with storage_errors("progress.list_range"), self.session_factory() as session:
            statement = (
                select(DailyProgress)
                .where(DailyProgress.user_id == user_id)
                .where(DailyProgress.date >= start)
                .where(DailyProgress.date <= end)
                .order_by(DailyProgress.date)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert(self, record: DailyProgress, *, user_id: str) -> DailyProgress:
        with storage_errors("progress.upsert"), self.session_factory() as session:
            row = session.merge(DailyProgress(**{**record.model_dump(), "user_id": user_id}))
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row
