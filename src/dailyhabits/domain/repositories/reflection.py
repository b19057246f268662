"""Reflection repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.reflection import Reflection


class ReflectionRepository(Protocol):
    """Per-user reflections keyed by date."""

    def get(self, day: date, *, user_id: str) -> Optional[Reflection]:
        ...

    def list_recent(self, *, user_id: str, limit: int) -> list[Reflection]:
        """Return up to ``limit`` reflections, newest first."""
        ...

    def upsert(self, reflection: Reflection, *, user_id: str) -> Reflection:
        ...
