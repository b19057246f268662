"""Progress blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("progress", __name__, url_prefix="/progress")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
