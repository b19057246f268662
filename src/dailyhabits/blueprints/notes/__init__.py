"""Daily notes blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("notes", __name__, url_prefix="/notes")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
