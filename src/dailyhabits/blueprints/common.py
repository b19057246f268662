"""Helpers shared by the JSON blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import current_app, g, jsonify, redirect, request, url_for
from pydantic import BaseModel, ValidationError

from ..context import AppContext

F = TypeVar("F", bound=Callable[..., Any])
M = TypeVar("M", bound=BaseModel)

EXTENSION_KEY = "dailyhabits"


def app_context() -> AppContext:
    """Return the AppContext registered by ``create_app``."""

    return current_app.extensions[EXTENSION_KEY]


def prefers_json_response() -> bool:
    accepts = request.accept_mimetypes
    return request.is_json or accepts["application/json"] >= accepts["text/html"]


def request_payload() -> dict[str, Any]:
    """Merge a JSON body or submitted form fields into one dict."""

    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form.to_dict()


def parse_form(model: type[M], payload: dict[str, Any]) -> tuple[M | None, dict[str, list[str]]]:
    """Validate ``payload`` against a pydantic form; returns (form, errors)."""

    try:
        return model.model_validate(payload), {}
    except ValidationError as exc:
        structured: dict[str, list[str]] = {}
        for error in exc.errors(include_url=False):
            loc = error.get("loc", ())
            key = str(loc[0]) if loc else "__root__"
            structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
        return None, structured


def current_user_id() -> str:
    user = g.get("user")
    if user is None:
        raise RuntimeError("User is not authenticated")
    return user.id


def login_required(view: F) -> F:
    """Send unauthenticated callers to sign-in (401 for JSON clients)."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any):
        if g.get("user") is None:
            if prefers_json_response():
                return (
                    jsonify({"error": "authentication_required", "login_url": url_for("auth.login")}),
                    401,
                )
            return redirect(url_for("auth.login", next=request.path))
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


__all__ = [
    "EXTENSION_KEY",
    "app_context",
    "current_user_id",
    "login_required",
    "parse_form",
    "prefers_json_response",
    "request_payload",
]
