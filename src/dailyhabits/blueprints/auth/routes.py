"""Sign-in, sign-out and the per-request user/day bookkeeping."""

from __future__ import annotations

from flask import g, jsonify, session

from ...logging_config import get_logger
from ...services import auth as auth_service
from ..common import app_context, login_required, parse_form, request_payload
from . import bp
from .forms import CredentialsForm

logger = get_logger("blueprints.auth")

SESSION_USER_KEY = "user_id"
SESSION_RESET_KEY = "reset_on"


@bp.before_app_request
def load_current_user() -> None:
    """Resolve the signed-in user and run the daily reset once per session day."""

    ctx = app_context()
    user_id = session.get(SESSION_USER_KEY)
    g.user = auth_service.get_user(user_id, ctx.session_factory) if user_id else None
    if user_id and g.user is None:
        # Account removed since sign-in
        session.clear()
        return
    if g.user is None:
        return

    today = ctx.clock().isoformat()
    if session.get(SESSION_RESET_KEY) != today:
        ctx.ledger_for(g.user.id).reset_daily_if_needed()
        ctx.aggregator_for(g.user.id).recompute_today()
        session[SESSION_RESET_KEY] = today


def _user_payload(user) -> dict:
    return {"id": user.id, "username": user.username}


@bp.get("/login")
def login():
    """Describe how to sign in; unauthenticated callers are sent here."""

    return jsonify({"message": "POST username and password to this URL to sign in."})


@bp.post("/login")
def login_submit():
    form, errors = parse_form(CredentialsForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_credentials", "fields": errors}), 400

    ctx = app_context()
    user = auth_service.authenticate(
        username=form.username, password=form.password, session_factory=ctx.session_factory
    )
    if user is None:
        return jsonify({"error": "invalid_credentials"}), 401

    session.clear()
    session[SESSION_USER_KEY] = user.id
    logger.info("User signed in", extra={"user_id": user.id})
    return jsonify({"user": _user_payload(user)})


@bp.post("/register")
def register():
    form, errors = parse_form(CredentialsForm, request_payload())
    if form is None:
        return jsonify({"error": "invalid_credentials", "fields": errors}), 400

    ctx = app_context()
    try:
        user = auth_service.create_user(
            username=form.username, password=form.password, session_factory=ctx.session_factory
        )
    except ValueError as exc:
        return jsonify({"error": "registration_failed", "message": str(exc)}), 400

    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify({"user": _user_payload(user)}), 201


@bp.post("/logout")
def logout():
    user_id = session.get(SESSION_USER_KEY)
    session.clear()
    if user_id:
        app_context().forget_user(user_id)
        logger.info("User signed out", extra={"user_id": user_id})
    return jsonify({"signed_out": True})


@bp.get("/me")
@login_required
def me():
    return jsonify({"user": _user_payload(g.user)})
