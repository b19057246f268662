"""Today's focus and note routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify

from ..common import app_context, current_user_id, login_required, parse_form, request_payload
from . import bp
from .forms import DailyNoteForm


@bp.get("/")
@login_required
def today():
    notebook = app_context().notebook_for(current_user_id())
    return jsonify({"note": notebook.get_today().to_dict()})


@bp.get("/<day>")
@login_required
def for_day(day: str):
    try:
        target = date.fromisoformat(day)
    except ValueError:
        return jsonify({"error": "invalid_date", "date": day}), 400

    notebook = app_context().notebook_for(current_user_id())
    return jsonify({"note": notebook.get(target).to_dict()})


@bp.put("/")
@login_required
def save():
    """Update today's (or ``date``'s) focus and note."""

    form, errors = parse_form(DailyNoteForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_note", "fields": errors}), 400

    notebook = app_context().notebook_for(current_user_id())
    try:
        stored = notebook.save(focus=form.focus, note=form.note, day=form.date)
    except ValueError as exc:
        return jsonify({"error": "invalid_date", "message": str(exc)}), 400
    return jsonify({"note": stored.to_dict()})
