"""DailyHabits application factory."""

from __future__ import annotations

from datetime import date
from importlib import import_module
from typing import Iterable, Optional

from flask import Flask, jsonify, redirect, url_for

from .config import BaseConfig, DevConfig, TestConfig
from .context import AppContext, create_app_context
from .errors import PersistenceError
from .logging_config import get_logger, setup_logging
from .services.ledger import Clock

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger("app")


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    yield "dailyhabits.blueprints.auth"
    yield "dailyhabits.blueprints.habits"
    yield "dailyhabits.blueprints.notes"
    yield "dailyhabits.blueprints.progress"
    yield "dailyhabits.blueprints.reflection"


def create_app(
    config_name: str | None = None,
    *,
    config: Optional[BaseConfig] = None,
    clock: Clock = date.today,
) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["DAILYHABITS_CONFIG"] = config_obj

    setup_logging(config_obj)

    ctx = create_app_context(config_obj, clock=clock)
    from .blueprints.common import EXTENSION_KEY

    app.extensions[EXTENSION_KEY] = ctx

    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/")
    def index():
        return redirect(url_for("habits.list_habits"))

    from . import cli as _cli

    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, "bp"))


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PersistenceError)
    def _persistence_unavailable(exc: PersistenceError):
        logger.error("Request failed on storage", extra={"operation": exc.operation})
        return (
            jsonify(
                {
                    "error": "persistence_unavailable",
                    "operation": exc.operation,
                    "message": "Your change was not saved. Please try again.",
                }
            ),
            503,
        )


__all__ = [
    "AppContext",
    "BaseConfig",
    "DevConfig",
    "TestConfig",
    "create_app",
    "create_app_context",
]
