"""Auth/session constants."""

from __future__ import annotations

# Session keys
IDENTITY_SESSION_KEY = "identity"
OAUTH_STATE_SESSION_KEY = "oauth_state"

# Flash categories
FLASH_SUCCESS = "success"
FLASH_INFO = "info"

# Flash messages
MSG_LOGIN_REQUIRED = "You have to login to contact us!"
MSG_ALREADY_LOGGED_IN = "You are already logged in!"
MSG_LOGGED_IN_WITH = "Successfully logged in with {provider}!"

__all__ = [
    "IDENTITY_SESSION_KEY",
    "OAUTH_STATE_SESSION_KEY",
    "FLASH_SUCCESS",
    "FLASH_INFO",
    "MSG_LOGIN_REQUIRED",
    "MSG_ALREADY_LOGGED_IN",
    "MSG_LOGGED_IN_WITH",
]
