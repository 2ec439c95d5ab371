"""OAuth2 identity provider adapters (Google, Facebook)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlencode

import requests

from bluechip.core.auth.identity import Identity

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

FACEBOOK_GRAPH_VERSION = "v19.0"
FACEBOOK_AUTH_URL = f"https://www.facebook.com/{FACEBOOK_GRAPH_VERSION}/dialog/oauth"
FACEBOOK_TOKEN_URL = f"https://graph.facebook.com/{FACEBOOK_GRAPH_VERSION}/oauth/access_token"
FACEBOOK_PROFILE_URL = f"https://graph.facebook.com/{FACEBOOK_GRAPH_VERSION}/me"
FACEBOOK_PROFILE_FIELDS = "id,name,email"


class AuthHandshakeError(Exception):
    """Raised when a provider refuses or fails the handshake."""

    pass


@dataclass(frozen=True)
class ProviderConfig:
    client_id: str
    client_secret: str
    callback_url: str
    scopes: Tuple[str, ...] = ()
    timeout: float = 30.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any], prefix: str) -> "ProviderConfig":
        """Build from ``<PREFIX>_CLIENT_ID`` style keys, e.g. ``GOOGLE_CLIENT_ID``."""
        return cls(
            client_id=config.get(f"{prefix}_CLIENT_ID", ""),
            client_secret=config.get(f"{prefix}_CLIENT_SECRET", ""),
            callback_url=config.get(f"{prefix}_CALLBACK_URL", ""),
            scopes=tuple(config.get(f"{prefix}_SCOPES") or ()),
            timeout=float(config.get("OAUTH_TIMEOUT_SECONDS", 30)),
        )


class OAuthProvider:
    """Authorization-code flow against one provider.

    Subclasses supply the endpoint URLs and how the access token is
    exchanged for a profile. The profile is returned untouched.
    """

    name = ""
    label = ""
    authorize_url = ""
    scope_separator = " "

    def __init__(self, config: ProviderConfig, http: Optional[requests.Session] = None):
        self.config = config
        self.http = http or requests.Session()

    def build_authorization_redirect(self, requested_scopes: Sequence[str], state: str) -> str:
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.callback_url,
            "response_type": "code",
            "scope": self.scope_separator.join(requested_scopes),
            "state": state,
        }
        params.update(self.extra_authorization_params())
        return f"{self.authorize_url}?{urlencode(params)}"

    def extra_authorization_params(self) -> Dict[str, str]:
        return {}

    def complete_handshake(self, callback_args: Mapping[str, str]) -> Identity:
        """Exchange the callback's code for the provider profile."""
        error = callback_args.get("error")
        if error:
            raise AuthHandshakeError(f"{self.name} reported {error}")
        code = callback_args.get("code")
        if not code:
            raise AuthHandshakeError(f"{self.name} callback carried no code")
        try:
            access_token = self.exchange_code(code)
            profile = self.fetch_profile(access_token)
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.warning("%s handshake failed: %s", self.name, exc.__class__.__name__)
            raise AuthHandshakeError(f"{self.name} handshake failed") from exc
        return Identity(provider=self.name, profile=profile)

    def exchange_code(self, code: str) -> str:
        raise NotImplementedError

    def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        raise NotImplementedError


class GoogleProvider(OAuthProvider):
    name = "google"
    label = "Google"
    authorize_url = GOOGLE_AUTH_URL

    def extra_authorization_params(self) -> Dict[str, str]:
        return {"access_type": "online", "include_granted_scopes": "true"}

    def exchange_code(self, code: str) -> str:
        resp = self.http.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "redirect_uri": self.config.callback_url,
                "grant_type": "authorization_code",
                "code": code,
            },
            timeout=self.config.timeout,
        )
        resp.raise_for_status()
        return resp.json()["access_token"]

    def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        resp = self.http.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self.config.timeout,
        )
        resp.raise_for_status()
        return resp.json()


class FacebookProvider(OAuthProvider):
    name = "facebook"
    label = "Facebook"
    authorize_url = FACEBOOK_AUTH_URL
    scope_separator = ","

    def exchange_code(self, code: str) -> str:
        resp = self.http.get(
            FACEBOOK_TOKEN_URL,
            params={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "redirect_uri": self.config.callback_url,
                "code": code,
            },
            timeout=self.config.timeout,
        )
        resp.raise_for_status()
        return resp.json()["access_token"]

    def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        resp = self.http.get(
            FACEBOOK_PROFILE_URL,
            params={"fields": FACEBOOK_PROFILE_FIELDS, "access_token": access_token},
            timeout=self.config.timeout,
        )
        resp.raise_for_status()
        return resp.json()


PROVIDER_CLASSES = {
    GoogleProvider.name: (GoogleProvider, "GOOGLE"),
    FacebookProvider.name: (FacebookProvider, "FACEBOOK"),
}


def build_providers(config: Mapping[str, Any]) -> Dict[str, OAuthProvider]:
    """Instantiate every adapter once, each with its own explicit config."""
    return {
        name: cls(ProviderConfig.from_mapping(config, prefix))
        for name, (cls, prefix) in PROVIDER_CLASSES.items()
    }


__all__ = [
    "AuthHandshakeError",
    "FacebookProvider",
    "GoogleProvider",
    "OAuthProvider",
    "ProviderConfig",
    "build_providers",
]
