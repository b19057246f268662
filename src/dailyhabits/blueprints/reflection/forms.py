"""Reflection form definitions."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReflectionAnswer(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str = Field(max_length=200)
    answer: str = Field(default="", max_length=4000)


class ReflectionForm(BaseModel):
    """Answers to the evening prompts; ``date`` defaults to today."""

    date: Optional[dt.date] = None
    responses: list[ReflectionAnswer] = Field(default_factory=list, min_length=1)


__all__ = ["ReflectionAnswer", "ReflectionForm"]
