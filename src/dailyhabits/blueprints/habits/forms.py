"""Habit form definitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TargetState(str, Enum):
    """Requested completion state for today."""

    COMPLETE = "complete"
    UNDO = "undo"


class HabitForm(BaseModel):
    """Form model for creating or renaming a habit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="", description="Short label for the habit", max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the habit name is present when validating submissions."""

        if not value:
            raise ValueError("Please provide a habit name.")
        return value


class CompletionForm(BaseModel):
    target_state: TargetState = Field(default=TargetState.COMPLETE)


__all__ = ["CompletionForm", "HabitForm", "TargetState"]
