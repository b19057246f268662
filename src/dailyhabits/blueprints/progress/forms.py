"""Progress correction form."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProgressCorrectionForm(BaseModel):
    """Corrected counts for an elapsed day."""

    model_config = ConfigDict(populate_by_name=True)

    completed_count: int = Field(ge=0, alias="completedCount")
    total_habits: int = Field(ge=0, alias="totalHabits")

    @model_validator(mode="after")
    def ensure_consistent(self) -> "ProgressCorrectionForm":
        if self.completed_count > self.total_habits:
            raise ValueError("Completed count cannot exceed total habits.")
        return self


__all__ = ["ProgressCorrectionForm"]
