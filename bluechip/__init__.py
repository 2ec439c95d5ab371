"""BlueChip Apps site: application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask

from bluechip.config import config_by_name, missing_settings
from bluechip.core.auth.csrf import generate_csrf_token
from bluechip.core.auth.providers import build_providers
from bluechip.core.auth.session_services import session_manager
from bluechip.core.errors import register_error_handlers
from bluechip.domains.contact.schemas.contact_schemas import ContactRules
from bluechip.domains.contact.services.sheets_service import SheetsClient
from bluechip.extensions import init_extensions, login_manager


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the BlueChip Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    package_root = Path(__file__).resolve().parent

    app = Flask(
        __name__,
        static_folder=str(package_root / "static"),
        template_folder=str(package_root / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    missing = missing_settings(app.config)
    if missing:
        if app.config.get("ENV") == "production":
            raise RuntimeError(f"Missing required settings: {', '.join(missing)}")
        app.logger.warning("Missing settings (features depending on them will fail): %s", ", ".join(missing))

    init_extensions(app)
    _register_blueprints(app)
    register_error_handlers(app)
    _register_auth_handlers(app)

    # Outbound collaborators, built once from config and looked up per request.
    app.extensions["identity_providers"] = build_providers(app.config)
    app.extensions["sheets_client"] = SheetsClient.from_config(app.config)
    app.extensions["contact_rules"] = ContactRules.from_config(app.config)

    from bluechip.cli import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from bluechip.core.auth.controllers import auth_bp  # local import to avoid circulars
    from bluechip.core.pages import main_pages_bp
    from bluechip.domains.contact.controllers.contact_pages import contact_pages_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(contact_pages_bp)
    # Registered last: it owns the catch-all route.
    app.register_blueprint(main_pages_bp)


def _register_auth_handlers(app: Flask) -> None:
    """Login manager and template helpers."""

    @login_manager.user_loader
    def _load_identity(user_id: str):
        return session_manager.restore(user_id)

    @app.context_processor
    def inject_csrf_token():
        return {"csrf_token": generate_csrf_token}
