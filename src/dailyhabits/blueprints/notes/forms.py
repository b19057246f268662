"""Daily note form definitions."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...models.daily_note import FOCUS_MAX_LENGTH, NOTE_MAX_LENGTH


class DailyNoteForm(BaseModel):
    """Focus and/or note for a date; omitted fields keep their stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = None
    focus: Optional[str] = Field(default=None, max_length=FOCUS_MAX_LENGTH)
    note: Optional[str] = Field(default=None, max_length=NOTE_MAX_LENGTH)

    @model_validator(mode="after")
    def ensure_something_to_save(self) -> "DailyNoteForm":
        if self.focus is None and self.note is None:
            raise ValueError("Provide a focus or a note.")
        return self


__all__ = ["DailyNoteForm"]
