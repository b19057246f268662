"""Reflection routes."""

from __future__ import annotations

from flask import jsonify, request

from ..common import app_context, current_user_id, login_required, parse_form, request_payload
from . import bp
from .forms import ReflectionForm

MAX_HISTORY = 60


def _reflection_payload(reflection) -> dict:
    payload = reflection.to_dict()
    payload["answeredCount"] = reflection.answered_count
    return payload


@bp.get("/")
@login_required
def today():
    journal = app_context().journal_for(current_user_id())
    return jsonify(
        {
            "reflection": _reflection_payload(journal.get_today()),
            "prompts": list(journal.prompts),
        }
    )


@bp.post("/")
@login_required
def save():
    form, errors = parse_form(ReflectionForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_reflection", "fields": errors}), 400

    journal = app_context().journal_for(current_user_id())
    try:
        stored = journal.save(
            [item.model_dump() for item in form.responses],
            day=form.date,
        )
    except ValueError as exc:
        return jsonify({"error": "invalid_date", "message": str(exc)}), 400
    return jsonify({"reflection": _reflection_payload(stored)})


@bp.get("/history")
@login_required
def history():
    limit = request.args.get("limit", default=7, type=int) or 7
    journal = app_context().journal_for(current_user_id())
    entries = journal.history(min(max(limit, 1), MAX_HISTORY))
    return jsonify({"reflections": [_reflection_payload(entry) for entry in entries]})
