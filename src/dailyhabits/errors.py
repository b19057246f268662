"""Exception types shared across the habit tracker."""

from __future__ import annotations


class DailyHabitsError(Exception):
    """Base class for application errors."""


class PersistenceError(DailyHabitsError):
    """A storage read or write failed; the requested action was not applied.

    Callers may retry the same action. The ledger guarantees its in-memory state
    is unchanged when this is raised.
    """

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        detail = message or "storage unavailable"
        super().__init__(f"{operation} failed: {detail}")


__all__ = ["DailyHabitsError", "PersistenceError"]
