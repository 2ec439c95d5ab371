import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bluechip import create_app
from bluechip.core.auth.constants import IDENTITY_SESSION_KEY
from bluechip.core.auth.identity import Identity
from bluechip.core.auth.providers import AuthHandshakeError
from bluechip.core.auth.session_services import serialize


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (app + test client)")


class FakeSheetsClient:
    """Records appended rows instead of calling Google Sheets."""

    def __init__(self, error: Exception | None = None):
        self.rows = []
        self.error = error

    def append_row(self, name, email, message):
        if self.error is not None:
            raise self.error
        self.rows.append((name, email, message))
        return {"updates": {"updatedRows": 1}}


class FakeProvider:
    """Stands in for an OAuth adapter; returns a canned profile or fails."""

    def __init__(self, name, label, profile=None, fail=False):
        self.name = name
        self.label = label
        self.profile = profile or {"id": f"{name}-123", "name": "Ana Test"}
        self.fail = fail
        self.scopes_seen = None
        self.config = type("Cfg", (), {"scopes": ("email", "profile")})()

    def build_authorization_redirect(self, requested_scopes, state):
        self.scopes_seen = tuple(requested_scopes)
        return f"https://{self.name}.example.com/authorize?state={state}"

    def complete_handshake(self, callback_args):
        if self.fail or callback_args.get("error"):
            raise AuthHandshakeError(f"{self.name} refused")
        return Identity(provider=self.name, profile=dict(self.profile))


@pytest.fixture()
def sheets():
    return FakeSheetsClient()


@pytest.fixture()
def providers():
    return {
        "google": FakeProvider("google", "Google"),
        "facebook": FakeProvider("facebook", "Facebook"),
    }


@pytest.fixture()
def app(sheets, providers):
    app = create_app("testing")
    app.extensions["sheets_client"] = sheets
    app.extensions["identity_providers"] = providers
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login(client):
    """Attach an identity to the test client's session."""

    def _login(provider="google", profile=None):
        identity = Identity(provider=provider, profile=profile or {"id": "u-1", "name": "Ana"})
        with client.session_transaction() as sess:
            sess["_user_id"] = identity.get_id()
            sess["_fresh"] = True
            sess[IDENTITY_SESSION_KEY] = serialize(identity)
        return identity

    return _login


@pytest.fixture()
def queued_flashes(client):
    """Return the queued flash notices without consuming them."""

    def _read():
        with client.session_transaction() as sess:
            return [tuple(item) for item in sess.get("_flashes", [])]

    return _read
