"""Access guards: pipeline stages keyed on whether the session holds an identity."""

from __future__ import annotations

from flask import flash, redirect, url_for

from bluechip.core.auth.constants import FLASH_INFO, MSG_ALREADY_LOGGED_IN, MSG_LOGIN_REQUIRED
from bluechip.core.utils.decorators import Continue, Halt, RequestContext, StageResult


def require_authenticated(ctx: RequestContext) -> StageResult:
    if ctx.identity is not None:
        return Continue(ctx)
    flash(MSG_LOGIN_REQUIRED, FLASH_INFO)
    return Halt(redirect(url_for("auth.login")))


def require_anonymous(ctx: RequestContext) -> StageResult:
    if ctx.identity is None:
        return Continue(ctx)
    flash(MSG_ALREADY_LOGGED_IN, FLASH_INFO)
    return Halt(redirect(url_for("main_pages.home")))


__all__ = ["require_anonymous", "require_authenticated"]
