"""Shared extensions for the BlueChip application."""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager

from bluechip.core.auth.session_store import MemorySessionStore, ServerSideSessionInterface

# Auth and abuse-protection primitives; limits come from RATELIMIT_* config keys.
login_manager = LoginManager()
limiter = Limiter(key_func=get_remote_address)


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    # One in-process store per app; cookies only carry the signed session id.
    app.session_interface = ServerSideSessionInterface(MemorySessionStore())
    login_manager.init_app(app)
    login_manager.session_protection = "basic"
    limiter.init_app(app)
