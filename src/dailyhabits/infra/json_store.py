"""Whole-document JSON storage, one file per user.

Each user's file holds four arrays (``habits``, ``dailyProgress``,
``reflections`` and ``dailyNotes``) in the camelCase shape produced by the
models' ``to_dict``.
Every write rewrites the whole document through a temp file + rename.
"""

from __future__ import annotations

import fcntl
import json
import os
import re
import tempfile
import threading
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from ..errors import PersistenceError
from ..logging_config import get_logger
from ..models.daily_note import DailyNote
from ..models.habit import Habit
from ..models.progress import DailyProgress
from ..models.reflection import Reflection

logger = get_logger("infra.json_store")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_SECTIONS = ("habits", "dailyProgress", "reflections", "dailyNotes")

Document = dict[str, list[dict[str, Any]]]


def _empty_document() -> Document:
    return {section: [] for section in _SECTIONS}


class JsonDocumentStore:
    """Reads and atomically rewrites per-user JSON documents under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._lock = threading.RLock()

    def path_for(self, user_id: str) -> Path:
        if not _SAFE_KEY.match(user_id):
            raise ValueError(f"Unsupported user id for file storage: {user_id!r}")
        return self.root / f"{user_id}.json"

    def read(self, user_id: str) -> Document:
        path = self.path_for(user_id)
        with self._lock:
            try:
                if not path.exists():
                    return _empty_document()
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise PersistenceError("json_store.read", str(exc)) from exc

        if not text.strip():
            return _empty_document()
        try:
            raw = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable document", extra={"path": str(path)})
            return _empty_document()

        document = _empty_document()
        if isinstance(raw, dict):
            for section in _SECTIONS:
                items = raw.get(section)
                if isinstance(items, list):
                    document[section] = [item for item in items if isinstance(item, dict)]
        return document

    def write(self, user_id: str, document: Document) -> None:
        path = self.path_for(user_id)
        content = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        with self._lock:
            try:
                _atomic_write(path, content)
            except OSError as exc:
                raise PersistenceError("json_store.write", str(exc)) from exc

    @contextmanager
    def edit(self, user_id: str) -> Iterator[Document]:
        """Read-modify-write a document; nothing is written if the body raises."""

        with self._lock:
            document = self.read(user_id)
            yield document
            self.write(user_id, document)


def _atomic_write(path: Path, content: str) -> None:
    """Atomic write with file locking: temp file + flock + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def _replace_by(items: list[dict[str, Any]], key: str, value: Any, payload: dict[str, Any]) -> None:
    for index, item in enumerate(items):
        if item.get(key) == value:
            items[index] = payload
            return
    items.append(payload)


class JsonHabitRepository:
    """Habit repository over the ``habits`` array of a user's document."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self.store = store

    def list(self, *, user_id: str) -> list[Habit]:
        document = self.store.read(user_id)
        habits = []
        for item in document["habits"]:
            try:
                habits.append(Habit.from_dict(item, user_id=user_id))
            except (KeyError, ValueError, TypeError):
                logger.warning(
                    "Skipping malformed record",
                    extra={"section": "habits", "user_id": user_id, "habit_id": item.get("id")},
                )
        return sorted(habits, key=lambda h: (h.created_date, h.name))

    def upsert(self, habit: Habit, *, user_id: str) -> Habit:
        stored = habit.clone(user_id=user_id)
        with self.store.edit(user_id) as document:
            _replace_by(document["habits"], "id", stored.id, stored.to_dict())
        return stored

    def delete(self, habit_id: str, *, user_id: str) -> None:
        with self.store.edit(user_id) as document:
            document["habits"] = [h for h in document["habits"] if h.get("id") != habit_id]


class _DatedSection:
    """Shared helpers for the date-keyed sections."""

    section: str
    factory: Callable[..., Any]

    def __init__(self, store: JsonDocumentStore) -> None:
        self.store = store

    def _load(self, user_id: str) -> list[Any]:
        document = self.store.read(user_id)
        records = []
        for item in document[self.section]:
            try:
                records.append(self.factory(item, user_id=user_id))
            except (KeyError, ValueError, TypeError):
                logger.warning(
                    "Skipping malformed record", extra={"section": self.section, "user_id": user_id}
                )
        return records

    def _save(self, payload: dict[str, Any], *, user_id: str) -> None:
        with self.store.edit(user_id) as document:
            _replace_by(document[self.section], "date", payload["date"], payload)


class JsonProgressRepository(_DatedSection):
    section = "dailyProgress"
    factory = staticmethod(DailyProgress.from_dict)

    def get(self, day: date, *, user_id: str) -> Optional[DailyProgress]:
        for record in self._load(user_id):
            if record.date == day:
                return record
        return None

    def list_range(self, start: date, end: date, *, user_id: str) -> list[DailyProgress]:
        records = [r for r in self._load(user_id) if start <= r.date <= end]
        return sorted(records, key=lambda r: r.date)

    def upsert(self, record: DailyProgress, *, user_id: str) -> DailyProgress:
        stored = DailyProgress(**{**record.model_dump(), "user_id": user_id})
        self._save(stored.to_dict(), user_id=user_id)
        return stored


class JsonReflectionRepository(_DatedSection):
    section = "reflections"
    factory = staticmethod(Reflection.from_dict)

    def get(self, day: date, *, user_id: str) -> Optional[Reflection]:
        for record in self._load(user_id):
            if record.date == day:
                return record
        return None

    def list_recent(self, *, user_id: str, limit: int) -> list[Reflection]:
        records = sorted(self._load(user_id), key=lambda r: r.date, reverse=True)
        return records[:limit]

    def upsert(self, reflection: Reflection, *, user_id: str) -> Reflection:
        stored = Reflection(user_id=user_id, date=reflection.date, responses=list(reflection.responses))
        self._save(stored.to_dict(), user_id=user_id)
        return stored


class JsonDailyNoteRepository(_DatedSection):
    section = "dailyNotes"
    factory = staticmethod(DailyNote.from_dict)

    def get(self, day: date, *, user_id: str) -> Optional[DailyNote]:
        for record in self._load(user_id):
            if record.date == day:
                return record
        return None

    def upsert(self, note: DailyNote, *, user_id: str) -> DailyNote:
        stored = DailyNote(user_id=user_id, date=note.date, focus=note.focus, note=note.note)
        self._save(stored.to_dict(), user_id=user_id)
        return stored


__all__ = [
    "JsonDailyNoteRepository",
    "JsonDocumentStore",
    "JsonHabitRepository",
    "JsonProgressRepository",
    "JsonReflectionRepository",
]
