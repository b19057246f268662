"""SQLModel implementation of the daily note repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ...models.daily_note import DailyNote
from ..database import SessionFactory, storage_errors


class SQLModelDailyNoteRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, day: date, *, user_id: str) -> Optional[DailyNote]:
        with storage_errors("daily_note.get"), self.session_factory() as session:
            obj = session.get(DailyNote, (user_id, day))
            if obj:
                session.expunge(obj)
            return obj

    def upsert(self, note: DailyNote, *, user_id: str) -> DailyNote:
        with storage_errors("daily_note.upsert"), self.session_factory() as session:
            row = session.merge(
                DailyNote(user_id=user_id, date=note.date, focus=note.focus, note=note.note)
            )
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row
