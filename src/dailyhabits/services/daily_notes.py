"""Today's focus and note."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..domain.repositories.daily_note import DailyNoteRepository
from ..logging_config import get_logger
from ..models.daily_note import FOCUS_MAX_LENGTH, NOTE_MAX_LENGTH, DailyNote
from .ledger import Clock

logger = get_logger("services.daily_notes")


class DailyNotebook:
    """One focus line and one free-text note per user per date."""

    def __init__(
        self,
        repository: DailyNoteRepository,
        *,
        user_id: str,
        clock: Clock = date.today,
    ) -> None:
        self.repository = repository
        self.user_id = user_id
        self.clock = clock

    def get(self, day: date) -> DailyNote:
        """Stored entry for ``day``, or an empty one."""

        stored = self.repository.get(day, user_id=self.user_id)
        return stored or DailyNote(user_id=self.user_id, date=day)

    def get_today(self) -> DailyNote:
        return self.get(self.clock())

    def save(
        self,
        *,
        focus: Optional[str] = None,
        note: Optional[str] = None,
        day: Optional[date] = None,
    ) -> DailyNote:
        """Update the focus and/or note for ``day`` (default today).

        A field passed as ``None`` keeps its stored value; text is trimmed.
        """

        target = day or self.clock()
        if target > self.clock():
            raise ValueError("Cannot write a note for a future date")

        current = self.get(target)
        updated = DailyNote(
            user_id=self.user_id,
            date=target,
            focus=current.focus if focus is None else focus.strip(),
            note=current.note if note is None else note.strip(),
        )
        if len(updated.focus) > FOCUS_MAX_LENGTH:
            raise ValueError(f"Focus must be at most {FOCUS_MAX_LENGTH} characters")
        if len(updated.note) > NOTE_MAX_LENGTH:
            raise ValueError(f"Note must be at most {NOTE_MAX_LENGTH} characters")

        stored = self.repository.upsert(updated, user_id=self.user_id)
        logger.info(
            "Daily note saved",
            extra={"user_id": self.user_id, "date": target.isoformat()},
        )
        return stored
