"""Daily progress repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.progress import DailyProgress


class ProgressRepository(Protocol):
    """Per-user history of daily completion summaries keyed by date."""

    def get(self, day: date, *, user_id: str) -> Optional[DailyProgress]:
        """Return the summary stored for ``day``, if any."""
        ...

    def list_range(self, start: date, end: date, *, user_id: str) -> list[DailyProgress]:
        """Return stored summaries with ``start <= date <= end`` ordered by date."""
        ...

    def upsert(self, record: DailyProgress, *, user_id: str) -> DailyProgress:
        """Insert or overwrite the summary for ``record.date``."""
        ...
