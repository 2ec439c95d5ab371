"""Server-side session storage.

The browser only ever holds a signed, random session id. Everything else
(identity token, flash queue, OAuth state, CSRF token) lives in the store,
keyed by that id, until the absolute expiry fixed when the session was first
issued. Expiry is never pushed forward by later requests.

Concurrent requests for the same session are not serialized: each request
works on its own copy of the record and the last one saved wins.
"""

from __future__ import annotations

import copy
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32
SIGNER_SALT = "bluechip.session-id"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionRecord:
    data: Dict[str, Any]
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or _utcnow()) >= self.expires_at


class MemorySessionStore:
    """Process-local session records. Not shared between workers.

    Writes sweep out expired records at most once per ``purge_interval``, so
    abandoned sessions are dropped without anyone reading them again.
    """

    def __init__(self, purge_interval: timedelta = timedelta(minutes=10)) -> None:
        self._records: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()
        self.purge_interval = purge_interval
        self._next_purge = _utcnow() + purge_interval

    def _purge_locked(self, now: datetime) -> int:
        expired = [sid for sid, record in self._records.items() if record.is_expired(now)]
        for sid in expired:
            del self._records[sid]
        self._next_purge = now + self.purge_interval
        return len(expired)

    def get(self, sid: str) -> Optional[SessionRecord]:
        with self._lock:
            record = self._records.get(sid)
            if record is None:
                return None
            if record.is_expired():
                del self._records[sid]
                return None
            return SessionRecord(copy.deepcopy(record.data), record.expires_at)

    def set(self, sid: str, record: SessionRecord) -> None:
        now = _utcnow()
        with self._lock:
            if now >= self._next_purge:
                removed = self._purge_locked(now)
                if removed:
                    logger.debug("Purged %d expired session(s)", removed)
            self._records[sid] = SessionRecord(copy.deepcopy(record.data), record.expires_at)

    def delete(self, sid: str) -> None:
        with self._lock:
            self._records.pop(sid, None)

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_locked(_utcnow())

    def __contains__(self, sid: str) -> bool:
        return self.get(sid) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class ServerSession(CallbackDict, SessionMixin):
    """Session dict bound to a server-side record."""

    def __init__(
        self,
        initial: Optional[Dict[str, Any]] = None,
        *,
        sid: str,
        expires_at: datetime,
        new: bool = False,
    ) -> None:
        def on_update(self) -> None:
            self.modified = True
            self.accessed = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.expires_at = expires_at
        self.new = new
        self.modified = False
        self.accessed = False
        self.destroyed = False
        self.replaced_sid: Optional[str] = None

    def __getitem__(self, key: str) -> Any:
        self.accessed = True
        return super().__getitem__(key)

    def get(self, key: str, default: Any = None) -> Any:
        self.accessed = True
        return super().get(key, default)

    def setdefault(self, key: str, default: Any = None) -> Any:
        self.accessed = True
        return super().setdefault(key, default)

    def destroy(self) -> None:
        """Drop the whole record and cookie when the response is saved."""
        self.clear()
        self.destroyed = True

    def regenerate(self) -> None:
        """Move the data to a fresh id; the old id stops resolving."""
        if self.replaced_sid is None and not self.new:
            self.replaced_sid = self.sid
        self.sid = new_session_id()
        self.modified = True


def new_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


class ServerSideSessionInterface(SessionInterface):
    """Flask session interface backed by a session store and a signed id cookie."""

    session_class = ServerSession

    def __init__(self, store: MemorySessionStore) -> None:
        self.store = store

    def _signer(self, app) -> Optional[Signer]:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=SIGNER_SALT)

    def _fresh(self, app) -> ServerSession:
        return self.session_class(
            sid=new_session_id(),
            expires_at=_utcnow() + app.permanent_session_lifetime,
            new=True,
        )

    def open_session(self, app, request) -> Optional[ServerSession]:
        signer = self._signer(app)
        if signer is None:
            return None
        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self._fresh(app)
        try:
            sid = signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            logger.info("Ignoring session cookie with a bad signature")
            return self._fresh(app)
        record = self.store.get(sid)
        if record is None:
            return self._fresh(app)
        return self.session_class(record.data, sid=sid, expires_at=record.expires_at)

    def save_session(self, app, session: ServerSession, response) -> None:
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.accessed:
            response.vary.add("Cookie")

        if session.replaced_sid:
            self.store.delete(session.replaced_sid)

        if session.destroyed or not session:
            if not session.new:
                self.store.delete(session.sid)
            if session.destroyed or (session.modified and not session.new):
                response.delete_cookie(
                    name,
                    domain=domain,
                    path=path,
                    secure=self.get_cookie_secure(app),
                    samesite=self.get_cookie_samesite(app),
                    httponly=self.get_cookie_httponly(app),
                )
            return

        if not session.modified and not session.new:
            return

        self.store.set(session.sid, SessionRecord(dict(session), session.expires_at))
        signer = self._signer(app)
        response.set_cookie(
            name,
            signer.sign(session.sid).decode("utf-8"),
            expires=session.expires_at,
            max_age=max(0, int((session.expires_at - _utcnow()).total_seconds())),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )


__all__ = [
    "MemorySessionStore",
    "ServerSession",
    "ServerSideSessionInterface",
    "SessionRecord",
    "new_session_id",
]
