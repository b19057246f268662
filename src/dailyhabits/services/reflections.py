"""Evening reflection journal."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..domain.repositories.reflection import ReflectionRepository
from ..logging_config import get_logger
from ..models.reflection import Reflection
from .ledger import Clock

logger = get_logger("services.reflections")

DEFAULT_PROMPTS: tuple[str, ...] = (
    "What went well today with your habits?",
    "What was challenging today?",
    "What's one thing you're proud of?",
    "What could you improve tomorrow?",
    "How did you feel about your progress?",
)


class ReflectionJournal:
    def __init__(
        self,
        repository: ReflectionRepository,
        *,
        user_id: str,
        clock: Clock = date.today,
        prompts: Sequence[str] = DEFAULT_PROMPTS,
    ) -> None:
        self.repository = repository
        self.user_id = user_id
        self.clock = clock
        self.prompts = tuple(prompts)

    def blank(self, day: date) -> Reflection:
        return Reflection(
            user_id=self.user_id,
            date=day,
            responses=[{"question": prompt, "answer": ""} for prompt in self.prompts],
        )

    def get_today(self) -> Reflection:
        """Today's saved reflection, or an unanswered one seeded from the prompts."""

        today = self.clock()
        return self.repository.get(today, user_id=self.user_id) or self.blank(today)

    def save(
        self,
        responses: Iterable[Mapping[str, str]],
        *,
        day: Optional[date] = None,
    ) -> Reflection:
        """Store answers for ``day`` (default today), replacing any earlier entry."""

        target = day or self.clock()
        if target > self.clock():
            raise ValueError("Cannot write a reflection for a future date")

        cleaned = [
            {
                "question": str(item.get("question", "")).strip(),
                "answer": str(item.get("answer", "")).strip(),
            }
            for item in responses
        ]
        reflection = Reflection(user_id=self.user_id, date=target, responses=cleaned)
        stored = self.repository.upsert(reflection, user_id=self.user_id)
        logger.info(
            "Reflection saved",
            extra={
                "user_id": self.user_id,
                "date": target.isoformat(),
                "answered": stored.answered_count,
            },
        )
        return stored

    def history(self, limit: int = 7) -> list[Reflection]:
        return self.repository.list_recent(user_id=self.user_id, limit=max(0, limit))
