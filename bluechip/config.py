"""Application configuration for the BlueChip Apps site."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, List, Type

from dotenv import load_dotenv

# The deployment keeps its secrets in config.env; a plain .env still works locally.
load_dotenv(os.environ.get("BLUECHIP_ENV_FILE", "config.env"))
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _csv(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SESSION_SECRET", "change-me")
    SESSION_COOKIE_NAME = os.environ.get("SESSION_NAME", "bluechip_session")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "false")
    PERMANENT_SESSION_LIFETIME = timedelta(days=int(os.environ.get("SESSION_TTL_DAYS", "7")))
    WTF_CSRF_ENABLED = True

    # Identity providers
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_CALLBACK_URL = os.environ.get("GOOGLE_CALLBACK_URL", "http://localhost:3000/google/callback")
    GOOGLE_SCOPES = _csv("GOOGLE_SCOPES", "openid,email,profile")
    FACEBOOK_CLIENT_ID = os.environ.get("FACEBOOK_CLIENT_ID", "")
    FACEBOOK_CLIENT_SECRET = os.environ.get("FACEBOOK_CLIENT_SECRET", "")
    FACEBOOK_CALLBACK_URL = os.environ.get("FACEBOOK_CALLBACK_URL", "http://localhost:3000/facebook/callback")
    FACEBOOK_SCOPES = _csv("FACEBOOK_SCOPES", "email,public_profile")
    OAUTH_TIMEOUT_SECONDS = float(os.environ.get("OAUTH_TIMEOUT_SECONDS", "30"))

    # Google Sheets contact log
    SPREADSHEET_ID = os.environ.get("SPREADSHEET_ID", "")
    SHEETS_CREDENTIALS_FILE = os.environ.get("SHEETS_CREDENTIALS_FILE", "credentials.json")
    SHEETS_RANGE = os.environ.get("SHEETS_RANGE", "Sheet1!A:C")
    SHEETS_TIMEOUT_SECONDS = float(os.environ.get("SHEETS_TIMEOUT_SECONDS", "30"))

    # Contact form rules
    CONTACT_EMAIL_TLDS = _csv("CONTACT_EMAIL_TLDS", "com,net,edu")
    CONTACT_EMAIL_MIN_DOMAIN_SEGMENTS = int(os.environ.get("CONTACT_EMAIL_MIN_DOMAIN_SEGMENTS", "2"))
    CONTACT_MESSAGE_MAX_LENGTH = int(os.environ.get("CONTACT_MESSAGE_MAX_LENGTH", "100"))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    EXPOSE_ERROR_DETAILS = _flag("EXPOSE_ERROR_DETAILS", "true")
    PORT = int(os.environ.get("PORT", "3000"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    SECRET_KEY = "testing-secret"
    SESSION_COOKIE_NAME = "bluechip_test"
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    GOOGLE_CLIENT_ID = "google-client"
    GOOGLE_CLIENT_SECRET = "google-secret"
    GOOGLE_CALLBACK_URL = "http://localhost/google/callback"
    FACEBOOK_CLIENT_ID = "facebook-client"
    FACEBOOK_CLIENT_SECRET = "facebook-secret"
    FACEBOOK_CALLBACK_URL = "http://localhost/facebook/callback"
    SPREADSHEET_ID = "test-sheet"


class ProductionConfig(BaseConfig):
    ENV = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"
    EXPOSE_ERROR_DETAILS = _flag("EXPOSE_ERROR_DETAILS", "false")


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}

REQUIRED_SETTINGS = (
    "SECRET_KEY",
    "SESSION_COOKIE_NAME",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_CALLBACK_URL",
    "FACEBOOK_CLIENT_ID",
    "FACEBOOK_CLIENT_SECRET",
    "FACEBOOK_CALLBACK_URL",
    "SPREADSHEET_ID",
)


def missing_settings(config) -> List[str]:
    """Return required keys that are absent or empty. Values are not schema-checked."""
    return [key for key in REQUIRED_SETTINGS if not config.get(key)]
