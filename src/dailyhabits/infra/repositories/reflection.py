"""SQLModel implementation of the reflection repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import select

from ...models.reflection import Reflection
from ..database import SessionFactory, storage_errors


class SQLModelReflectionRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, day: date, *, user_id: str) -> Optional[Reflection]:
        with storage_errors("reflection.get"), self.session_factory() as session:
            obj = session.get(Reflection, (user_id, day))
            if obj:
                session.expunge(obj)
            return obj

    def list_recent(self, *, user_id: str, limit: int) -> list[Reflection]:
        with storage_errors("reflection.list_recent"), self.session_factory() as session:
            statement = (
                select(Reflection)
                .where(Reflection.user_id == user_id)
                .order_by(Reflection.date.desc())  # type: ignore[attr-defined]
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert(self, reflection: Reflection, *, user_id: str) -> Reflection:
        with storage_errors("reflection.upsert"), self.session_factory() as session:
            row = session.merge(
                Reflection(user_id=user_id, date=reflection.date, responses=list(reflection.responses))
            )
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row
