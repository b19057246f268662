"""Blueprint exports."""

from . import auth, habits, notes, progress, reflection

__all__ = [
    "auth",
    "habits",
    "notes",
    "progress",
    "reflection",
]
