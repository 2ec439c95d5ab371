"""Session lifecycle: attach, restore and tear down the OAuth identity."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, Optional

from flask import flash, session
from flask_login import current_user, login_user, logout_user

from bluechip.core.auth.constants import (
    FLASH_SUCCESS,
    IDENTITY_SESSION_KEY,
    MSG_LOGGED_IN_WITH,
    OAUTH_STATE_SESSION_KEY,
)
from bluechip.core.auth.identity import Identity

logger = logging.getLogger(__name__)


def serialize(identity: Identity) -> Dict[str, Any]:
    """Identity -> session token. Plain passthrough of every field."""
    return {"provider": identity.provider, "profile": identity.profile, "key": identity.key}


def deserialize(token: Dict[str, Any]) -> Identity:
    """Session token -> Identity.

    No re-validation against the provider happens here; a stored identity
    stays trusted until the session itself expires or is destroyed.
    """
    return Identity(provider=token["provider"], profile=token["profile"], key=token["key"])


class SessionManager:
    """Anonymous/Authenticated transitions for the current browsing session."""

    def is_authenticated(self) -> bool:
        return bool(current_user and current_user.is_authenticated)

    def current_identity(self) -> Optional[Identity]:
        if not self.is_authenticated():
            return None
        return current_user._get_current_object()

    def establish(self, identity: Identity, provider_label: str) -> None:
        """Anonymous -> Authenticated; queues exactly one success notice."""
        # New id on login so a pre-login cookie cannot ride the new identity.
        session.regenerate()
        login_user(identity)
        session[IDENTITY_SESSION_KEY] = serialize(identity)
        flash(MSG_LOGGED_IN_WITH.format(provider=provider_label), FLASH_SUCCESS)
        logger.info("Session authenticated via %s", identity.provider)

    def restore(self, user_id: str) -> Optional[Identity]:
        """Flask-Login user loader."""
        token = session.get(IDENTITY_SESSION_KEY)
        if not token:
            return None
        try:
            identity = deserialize(token)
        except (KeyError, TypeError):
            logger.warning("Discarding malformed identity token")
            return None
        if identity.get_id() != user_id:
            return None
        return identity

    def teardown(self) -> None:
        """Authenticated -> Anonymous; the whole session record goes away."""
        logout_user()
        session.destroy()

    def issue_oauth_state(self, provider: str) -> str:
        state = secrets.token_urlsafe(24)
        states = dict(session.get(OAUTH_STATE_SESSION_KEY) or {})
        states[provider] = state
        session[OAUTH_STATE_SESSION_KEY] = states
        return state

    def consume_oauth_state(self, provider: str, state: Optional[str]) -> bool:
        """Single-use check of the ``state`` echoed back by the provider."""
        states = dict(session.get(OAUTH_STATE_SESSION_KEY) or {})
        expected = states.pop(provider, None)
        if states:
            session[OAUTH_STATE_SESSION_KEY] = states
        else:
            session.pop(OAUTH_STATE_SESSION_KEY, None)
        if not expected or not state:
            return False
        return secrets.compare_digest(expected, state)


session_manager = SessionManager()

__all__ = ["SessionManager", "deserialize", "serialize", "session_manager"]
