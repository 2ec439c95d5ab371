from __future__ import annotations

from urllib.parse import urlparse

import pytest
import requests

pytestmark = pytest.mark.integration

from bluechip.core.auth.constants import FLASH_SUCCESS
from bluechip.domains.contact.services.contact_service import SENT_MESSAGE


def test_valid_submission_is_appended_once(client, login, sheets, queued_flashes):
    login()
    resp = client.post(
        "/contact", data={"name": "Ana", "email": "ana@school.edu", "message": "Hi"}
    )
    assert resp.status_code == 302
    assert urlparse(resp.headers["Location"]).path == "/"
    assert sheets.rows == [("Ana", "ana@school.edu", "Hi")]
    assert queued_flashes() == [(FLASH_SUCCESS, SENT_MESSAGE)]


def test_success_notice_shows_on_home_once(client, login):
    login()
    client.post("/contact", data={"name": "Ana", "email": "ana@school.edu", "message": "Hi"})
    assert SENT_MESSAGE in client.get("/").get_data(as_text=True)
    assert SENT_MESSAGE not in client.get("/").get_data(as_text=True)


def test_invalid_submission_renders_400_without_append(client, login, sheets):
    login()
    resp = client.post("/contact", data={"name": "", "email": "bad", "message": ""})
    assert resp.status_code == 400
    body = resp.get_data(as_text=True)
    assert "&#34;name&#34; is not allowed to be empty" in body
    assert "&#34;email&#34; must be a valid email" in body
    assert "&#34;message&#34; is not allowed to be empty" in body
    assert sheets.rows == []


def test_invalid_submission_from_anonymous_still_reports_400(client, sheets):
    resp = client.post("/contact", data={"name": "", "email": "bad", "message": ""})
    assert resp.status_code == 400
    assert sheets.rows == []


def test_sheets_failure_reaches_error_page(client, login, sheets):
    sheets.error = requests.HTTPError("403 Client Error: quota exceeded")
    login()
    resp = client.post("/contact", data={"name": "Ana", "email": "ana@school.edu", "message": "Hi"})
    assert resp.status_code == 500
    assert "quota exceeded" in resp.get_data(as_text=True)


def test_csrf_token_required_when_enabled(app, client, login, sheets):
    app.config["WTF_CSRF_ENABLED"] = True
    login()
    resp = client.post("/contact", data={"name": "Ana", "email": "ana@school.edu", "message": "Hi"})
    assert resp.status_code == 403
    assert sheets.rows == []


def test_csrf_token_from_form_is_accepted(app, client, login, sheets):
    app.config["WTF_CSRF_ENABLED"] = True
    login()
    page = client.get("/contact").get_data(as_text=True)
    token = page.split('name="csrf_token" value="', 1)[1].split('"', 1)[0]
    resp = client.post(
        "/contact",
        data={"name": "Ana", "email": "ana@school.edu", "message": "Hi", "csrf_token": token},
    )
    assert resp.status_code == 302
    assert sheets.rows == [("Ana", "ana@school.edu", "Hi")]
