"""Session identity produced by an OAuth handshake."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Any, Dict

from flask_login import UserMixin


@dataclass(eq=False)
class Identity(UserMixin):
    """Provider profile attached to a browsing session.

    ``profile`` is whatever the provider returned and is never mapped or
    checked by the auth flow; only templates peek at it through
    ``display_name``. ``key`` is minted per login and doubles as the
    Flask-Login id.
    """

    provider: str
    profile: Dict[str, Any]
    key: str = field(default_factory=lambda: secrets.token_hex(16))

    def get_id(self) -> str:
        return f"{self.provider}:{self.key}"

    @property
    def display_name(self) -> str:
        for attr in ("name", "displayName", "email"):
            value = self.profile.get(attr)
            if value:
                return str(value)
        return "there"
