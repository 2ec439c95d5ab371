from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from bluechip.core.auth.identity import Identity
from bluechip.core.auth.session_services import deserialize, serialize
from bluechip.core.auth.session_store import MemorySessionStore, SessionRecord


def _now():
    return datetime.now(timezone.utc)


# ==================== Store ====================


@pytest.mark.unit
def test_store_returns_copies():
    store = MemorySessionStore()
    store.set("sid", SessionRecord({"_flashes": [("info", "a")]}, _now() + timedelta(days=1)))

    record = store.get("sid")
    record.data["_flashes"].append(("info", "b"))

    assert store.get("sid").data == {"_flashes": [("info", "a")]}


@pytest.mark.unit
def test_store_drops_expired_records():
    store = MemorySessionStore()
    store.set("old", SessionRecord({"k": 1}, _now() - timedelta(seconds=1)))
    store.set("live", SessionRecord({"k": 2}, _now() + timedelta(days=1)))

    assert store.get("old") is None
    assert "live" in store
    assert len(store) == 1


@pytest.mark.unit
def test_purge_expired_counts_removed():
    store = MemorySessionStore()
    store.set("a", SessionRecord({}, _now() - timedelta(minutes=5)))
    store.set("b", SessionRecord({}, _now() - timedelta(minutes=1)))
    store.set("c", SessionRecord({}, _now() + timedelta(minutes=1)))
    assert store.purge_expired() == 2
    assert len(store) == 1


@pytest.mark.unit
def test_writes_sweep_abandoned_expired_records():
    store = MemorySessionStore(purge_interval=timedelta(0))
    for sid in ("gone-1", "gone-2", "gone-3"):
        store.set(sid, SessionRecord({"_flashes": []}, _now() - timedelta(seconds=1)))

    store.set("live", SessionRecord({"k": 1}, _now() + timedelta(days=7)))

    assert len(store) == 1
    assert "live" in store


@pytest.mark.unit
def test_writes_do_not_sweep_before_interval():
    store = MemorySessionStore(purge_interval=timedelta(hours=1))
    store.set("gone", SessionRecord({}, _now() - timedelta(seconds=1)))
    store.set("live", SessionRecord({}, _now() + timedelta(days=7)))
    assert len(store) == 2
    assert store.purge_expired() == 1


@pytest.mark.integration
def test_new_visitor_session_triggers_sweep(app):
    store = app.session_interface.store
    store.purge_interval = timedelta(0)
    for i in range(20):
        store.set(f"abandoned-{i}", SessionRecord({"k": i}, _now() - timedelta(seconds=1)))

    app.test_client().get("/contact")  # anonymous: the login notice creates a record

    assert len(store) == 1


@pytest.mark.unit
def test_identity_round_trips_unchanged():
    identity = Identity(provider="facebook", profile={"id": "42", "nested": {"a": [1, 2]}})
    restored = deserialize(serialize(identity))
    assert restored.provider == identity.provider
    assert restored.profile == identity.profile
    assert restored.get_id() == identity.get_id()


# ==================== Cookie + interface ====================


@pytest.mark.integration
def test_untouched_session_sets_no_cookie(app, client):
    client.get("/")
    assert client.get_cookie(app.config["SESSION_COOKIE_NAME"]) is None
    assert len(app.session_interface.store) == 0


@pytest.mark.integration
def test_cookie_is_http_only_signed_id_with_seven_day_expiry(app, client):
    resp = client.get("/contact")
    header = resp.headers["Set-Cookie"]
    assert "HttpOnly" in header
    assert "Max-Age=604" in header  # 7 days = 604800 seconds

    value = client.get_cookie(app.config["SESSION_COOKIE_NAME"]).value
    assert "You have to login" not in value
    sid = app.session_interface._signer(app).unsign(value).decode()
    assert sid in app.session_interface.store


@pytest.mark.integration
def test_expiry_is_fixed_at_issuance(app, client, login):
    login()
    name = app.config["SESSION_COOKIE_NAME"]
    signer = app.session_interface._signer(app)
    store = app.session_interface.store
    sid = signer.unsign(client.get_cookie(name).value).decode()
    issued = store.get(sid).expires_at

    # Each of these writes to the session (queue a notice, then render it).
    for path in ("/login", "/", "/login", "/"):
        client.get(path)
        assert signer.unsign(client.get_cookie(name).value).decode() == sid
        assert store.get(sid).expires_at == issued


@pytest.mark.integration
def test_tampered_cookie_starts_fresh_session(app, client, login):
    login()
    name = app.config["SESSION_COOKIE_NAME"]
    value = client.get_cookie(name).value
    client.set_cookie(name, value[:-2] + ("aa" if not value.endswith("aa") else "bb"))
    resp = client.get("/contact")
    assert resp.headers["Location"].endswith("/login")


@pytest.mark.integration
def test_expired_session_is_anonymous(app, client, login):
    login()
    value = client.get_cookie(app.config["SESSION_COOKIE_NAME"]).value
    sid = app.session_interface._signer(app).unsign(value).decode()
    store = app.session_interface.store
    record = store.get(sid)
    store.set(sid, SessionRecord(record.data, _now() - timedelta(seconds=1)))

    resp = client.get("/contact")
    assert resp.headers["Location"].endswith("/login")


@pytest.mark.integration
def test_flash_notice_is_rendered_exactly_once(client):
    client.get("/contact")
    first = client.get("/login").get_data(as_text=True)
    second = client.get("/login").get_data(as_text=True)
    assert "You have to login to contact us!" in first
    assert "You have to login to contact us!" not in second
