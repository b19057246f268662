"""Daily note repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.daily_note import DailyNote


class DailyNoteRepository(Protocol):
    """Per-user focus/note entries keyed by date."""

    def get(self, day: date, *, user_id: str) -> Optional[DailyNote]:
        ...

    def upsert(self, note: DailyNote, *, user_id: str) -> DailyNote:
        """Insert or overwrite the entry for ``note.date``."""
        ...
