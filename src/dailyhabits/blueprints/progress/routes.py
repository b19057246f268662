"""Progress routes: today's summary, the rolling window and corrections."""

from __future__ import annotations

from datetime import date

from flask import jsonify, request

from ...models.progress import DailyProgress
from ...services.progress import WEEK_DAYS
from ..common import app_context, current_user_id, login_required, parse_form, request_payload
from . import bp
from .forms import ProgressCorrectionForm

MAX_WINDOW_DAYS = 90


@bp.get("/")
@login_required
def today():
    aggregator = app_context().aggregator_for(current_user_id())
    return jsonify({"progress": aggregator.get_today().to_dict()})


@bp.get("/week")
@login_required
def week():
    """Weekly summary: average completion, perfect days and best day."""

    raw = request.args.get("days", default=str(WEEK_DAYS))
    days = int(raw) if raw.isdigit() else 0
    if not 1 <= days <= MAX_WINDOW_DAYS:
        return jsonify({"error": "invalid_days", "max": MAX_WINDOW_DAYS}), 400

    aggregator = app_context().aggregator_for(current_user_id())
    return jsonify(aggregator.weekly_summary(days).to_dict())


@bp.put("/<day>")
@login_required
def correct(day: str):
    try:
        target = date.fromisoformat(day)
    except ValueError:
        return jsonify({"error": "invalid_date", "date": day}), 400

    form, errors = parse_form(ProgressCorrectionForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_counts", "fields": errors}), 400

    user_id = current_user_id()
    aggregator = app_context().aggregator_for(user_id)
    try:
        stored = aggregator.correct(
            DailyProgress(
                user_id=user_id,
                date=target,
                completed_count=form.completed_count,
                total_habits=form.total_habits,
            )
        )
    except ValueError as exc:
        return jsonify({"error": "invalid_date", "message": str(exc)}), 400
    return jsonify({"progress": stored.to_dict()})
