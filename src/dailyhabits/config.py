"""Application configuration objects and helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("sqlmodel", "json")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DailyHabits"
    DB_FILENAME = "dailyhabits.db"
    JSON_STORE_DIRNAME = "users"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("DAILYHABITS_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DAILYHABITS_DEV_MODE", default=True)
        self.STORAGE_BACKEND = os.getenv("DAILYHABITS_STORAGE", "sqlmodel").strip().lower()
        self.DB_TIMEOUT = _env_float("DAILYHABITS_DB_TIMEOUT", default=5.0)
        self.DATABASE_URL = os.getenv("DAILYHABITS_DATABASE_URL", self._build_sqlite_url())
        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            raise ValueError(
                f"DAILYHABITS_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}; "
                f"got {self.STORAGE_BACKEND!r}."
            )
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("DAILYHABITS_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file, JSON stores and logs."""

        data_root = os.getenv("DAILYHABITS_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = Path(self.DATA_DIR) / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def json_store_dir(self) -> Path:
        """Directory holding one JSON document per user."""

        return Path(self.DATA_DIR) / self.JSON_STORE_DIRNAME

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            # sqlite3 raises OperationalError("database is locked") once this elapses
            connect_args["timeout"] = self.DB_TIMEOUT
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Isolated configuration for the test suite."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
        self.SECRET_KEY = "test-secret"

    def _resolve_data_dir(self) -> Path:
        configured = os.getenv("DAILYHABITS_DATA_DIR")
        if configured:
            return super()._resolve_data_dir()
        return Path(tempfile.mkdtemp(prefix="dailyhabits-test-"))


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "STORAGE_BACKENDS"]
