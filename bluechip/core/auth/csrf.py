"""Lightweight CSRF token helpers using the session."""

from __future__ import annotations

import secrets

from flask import current_app, request, session

from bluechip.core.errors import ErrorSignal, render_failure
from bluechip.core.utils.decorators import Continue, Halt, RequestContext, StageResult

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_FAILED_MESSAGE = "Form token missing or invalid."


def generate_csrf_token() -> str:
    """Return a stable CSRF token per-session."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def validate_csrf_token(token: str) -> bool:
    """Validate a provided CSRF token against the session."""
    if not token:
        return False
    return secrets.compare_digest(token, session.get(CSRF_TOKEN_SESSION_KEY, ""))


def csrf_protected(ctx: RequestContext) -> StageResult:
    """Stage: form field ``csrf_token`` or header ``X-CSRF-Token`` must match."""
    if not current_app.config.get("WTF_CSRF_ENABLED", True):
        return Continue(ctx)
    token = ctx.form.get("csrf_token") or request.headers.get("X-CSRF-Token") or ""
    if not validate_csrf_token(token):
        return Halt(render_failure(ErrorSignal(CSRF_FAILED_MESSAGE, 403)))
    return Continue(ctx)
