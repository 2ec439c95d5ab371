"""Auth HTTP controllers: login page, OAuth handshake, logout."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, redirect, render_template, request, url_for

from bluechip.core.auth.guards import require_anonymous
from bluechip.core.auth.providers import AuthHandshakeError, OAuthProvider
from bluechip.core.auth.session_services import session_manager
from bluechip.core.errors import RouteNotFound
from bluechip.core.utils.decorators import staged
from bluechip.extensions import limiter

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def get_provider(name: str) -> OAuthProvider:
    providers = current_app.extensions.get("identity_providers", {})
    provider = providers.get(name)
    if provider is None:
        raise RouteNotFound()
    return provider


@auth_bp.get("/login")
@staged(require_anonymous)
def login(ctx):
    providers = current_app.extensions.get("identity_providers", {})
    return render_template("user/login.html", providers=providers.values())


@auth_bp.get("/auth/<provider>")
@limiter.limit("20/minute")
@staged(require_anonymous)
def begin_handshake(ctx, provider: str):
    adapter = get_provider(provider)
    state = session_manager.issue_oauth_state(adapter.name)
    return redirect(adapter.build_authorization_redirect(adapter.config.scopes, state=state))


@auth_bp.get("/<provider>/callback")
def complete_handshake(provider: str):
    adapter = get_provider(provider)
    if not session_manager.consume_oauth_state(adapter.name, request.args.get("state")):
        logger.warning("Rejected %s callback with missing or stale state", adapter.name)
        return redirect(url_for("auth.login"))
    try:
        identity = adapter.complete_handshake(request.args)
    except AuthHandshakeError as exc:
        logger.info("Login via %s failed: %s", adapter.name, exc)
        return redirect(url_for("auth.login"))
    session_manager.establish(identity, adapter.label)
    return redirect(url_for("main_pages.home"))


@auth_bp.get("/logout")
def logout():
    session_manager.teardown()
    return redirect(url_for("main_pages.home"))
