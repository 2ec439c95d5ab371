"""Google Sheets append client for contact submissions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"


class SheetsClient:
    """Appends one row per call to a fixed range of a spreadsheet.

    Credentials are loaded from the service-account file on first use, so
    building the client never touches the filesystem or network. Failures
    (missing credentials, auth or quota errors) propagate to the caller.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_file: str,
        value_range: str = "Sheet1!A:C",
        timeout: float = 30.0,
        http: Optional[AuthorizedSession] = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_file = credentials_file
        self.value_range = value_range
        self.timeout = timeout
        self._http = http

    @classmethod
    def from_config(cls, config) -> "SheetsClient":
        return cls(
            spreadsheet_id=config.get("SPREADSHEET_ID", ""),
            credentials_file=config.get("SHEETS_CREDENTIALS_FILE", "credentials.json"),
            value_range=config.get("SHEETS_RANGE", "Sheet1!A:C"),
            timeout=float(config.get("SHEETS_TIMEOUT_SECONDS", 30)),
        )

    @property
    def http(self) -> AuthorizedSession:
        if self._http is None:
            credentials = service_account.Credentials.from_service_account_file(
                self.credentials_file, scopes=[SHEETS_SCOPE]
            )
            self._http = AuthorizedSession(credentials)
        return self._http

    def append_url(self) -> str:
        return f"{SHEETS_API}/{self.spreadsheet_id}/values/{quote(self.value_range)}:append"

    def append_row(self, name: str, email: str, message: str) -> Dict[str, Any]:
        resp = self.http.post(
            self.append_url(),
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json={"values": [[name, email, message]]},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        body = resp.json()
        logger.info("Appended contact row to %s", body.get("updates", {}).get("updatedRange"))
        return body


__all__ = ["SheetsClient", "SHEETS_API", "SHEETS_SCOPE"]
