"""Habit routes."""

from __future__ import annotations

from flask import jsonify

from ..common import app_context, current_user_id, login_required, parse_form, request_payload
from . import bp
from .forms import CompletionForm, HabitForm, TargetState


def _services():
    ctx = app_context()
    user_id = current_user_id()
    return ctx.ledger_for(user_id), ctx.aggregator_for(user_id)


def _not_found(habit_id: str):
    return jsonify({"error": "habit_not_found", "habit_id": habit_id}), 404


@bp.get("/")
@login_required
def list_habits():
    """Show habits with their streaks, today's summary and today's focus/note."""

    ledger, aggregator = _services()
    habits = ledger.habits
    note = app_context().notebook_for(current_user_id()).get_today()
    return jsonify(
        {
            "date": ledger.today().isoformat(),
            "habits": [habit.to_dict() for habit in habits],
            "progress": aggregator.get_today().to_dict(),
            "note": note.to_dict(),
        }
    )


@bp.post("/")
@login_required
def create_habit():
    form, errors = parse_form(HabitForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_name", "fields": errors}), 400

    ledger, aggregator = _services()
    habit = ledger.add(form.name)
    if habit is None:
        return jsonify({"error": "invalid_name"}), 400
    progress = aggregator.recompute_today()
    return jsonify({"habit": habit.to_dict(), "progress": progress.to_dict()}), 201


@bp.post("/<habit_id>/toggle")
@login_required
def toggle_habit(habit_id: str):
    """Complete a habit for today, or undo today's completion with target_state=undo."""

    form, errors = parse_form(CompletionForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_target_state", "fields": errors}), 400

    ledger, aggregator = _services()
    if ledger.get(habit_id) is None:
        return _not_found(habit_id)

    habit = ledger.set_completion(habit_id, form.target_state is TargetState.COMPLETE)
    if habit is None:
        # deleted by a concurrent request
        return _not_found(habit_id)
    progress = aggregator.recompute_today()
    return jsonify({"habit": habit.to_dict(), "progress": progress.to_dict()})


@bp.patch("/<habit_id>")
@login_required
def rename_habit(habit_id: str):
    form, errors = parse_form(HabitForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_name", "fields": errors}), 400

    ledger, _ = _services()
    habit = ledger.rename(habit_id, form.name)
    if habit is None:
        return _not_found(habit_id)
    return jsonify({"habit": habit.to_dict()})


@bp.delete("/<habit_id>")
@login_required
def delete_habit(habit_id: str):
    ledger, aggregator = _services()
    if not ledger.delete(habit_id):
        return _not_found(habit_id)
    progress = aggregator.recompute_today()
    return jsonify({"deleted": habit_id, "progress": progress.to_dict()})
