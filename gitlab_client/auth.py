"""Authentication sources.

An auth source supplies the header that authenticates each request. Sources
that hold mutable state (OAuth tokens that expire) guard it with a lock, since
one client instance may be used from several threads at once.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from gitlab_client.exceptions import AuthenticationError, ConfigurationError, DecodeError
from gitlab_client.request_options import AuthType, auth_header
from gitlab_client.response import Response
from gitlab_client.utils.decorators import translate_transport_errors

if TYPE_CHECKING:
    from gitlab_client.client.base import BaseClient

logger = logging.getLogger(__name__)

# Refresh tokens this many seconds before they actually expire
EXPIRY_MARGIN = 10.0


class AuthSource(ABC):
    """Supplies the authentication header for outgoing requests."""

    def init(self, client: "BaseClient") -> None:
        """Prepare the source; called once, before the first request."""

    @abstractmethod
    def header(self) -> tuple[str, str]:
        """Return the (name, value) header pair to attach."""


class AccessTokenAuthSource(AuthSource):
    """Personal, project or group access token (``PRIVATE-TOKEN``)."""

    def __init__(self, token: str):
        self.token = token

    def header(self) -> tuple[str, str]:
        return auth_header(AuthType.PRIVATE_TOKEN, self.token)


class JobTokenAuthSource(AuthSource):
    """CI job token (``JOB-TOKEN``)."""

    def __init__(self, token: str):
        self.token = token

    def header(self) -> tuple[str, str]:
        return auth_header(AuthType.JOB_TOKEN, self.token)


@dataclass
class OAuthToken:
    access_token: str
    refresh_token: str = ""
    expires_at: float | None = None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.time() >= self.expires_at - EXPIRY_MARGIN


class OAuthTokenSource(AuthSource):
    """OAuth2 bearer token, refreshed through ``token_provider`` when it expires.

    The provider receives the current token (None on first use) and returns a
    fresh one. Only one thread refreshes at a time; the others wait and reuse
    the result.
    """

    def __init__(self, token_provider: Callable[[OAuthToken | None], OAuthToken]):
        self._provider = token_provider
        self._token: OAuthToken | None = None
        self._lock = threading.Lock()

    @classmethod
    def static(cls, access_token: str) -> "OAuthTokenSource":
        token = OAuthToken(access_token=access_token)
        return cls(lambda _current: token)

    def token(self) -> OAuthToken:
        with self._lock:
            if self._token is None or self._token.expired:
                logger.debug("Refreshing OAuth token")
                self._token = self._provider(self._token)
            return self._token

    def header(self) -> tuple[str, str]:
        return auth_header(AuthType.OAUTH_TOKEN, self.token().access_token)


class PasswordCredentialsAuthSource(AuthSource):
    """Exchange a username and password for an OAuth token (resource owner password grant).

    The exchange runs once, on the first request, against ``<base>/oauth/token``;
    afterwards the refresh token is used whenever the access token expires.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self._delegate: OAuthTokenSource | None = None
        self._lock = threading.Lock()

    def init(self, client: "BaseClient") -> None:
        with self._lock:
            if self._delegate is not None:
                return
            token_url = f"{client.base_url}/oauth/token"

            def provider(current: OAuthToken | None) -> OAuthToken:
                if current is not None and current.refresh_token:
                    data = {"grant_type": "refresh_token", "refresh_token": current.refresh_token}
                else:
                    data = {"grant_type": "password", "username": self.username, "password": self.password}
                return _request_token(client.http, token_url, data)

            self._delegate = OAuthTokenSource(provider)

    def header(self) -> tuple[str, str]:
        if self._delegate is None:
            raise ConfigurationError("PasswordCredentialsAuthSource used before init()")
        return self._delegate.header()


@translate_transport_errors("request OAuth token")
def _post_token(http: httpx.Client, token_url: str, data: dict[str, str]) -> httpx.Response:
    return http.post(token_url, data=data)


def _request_token(http: httpx.Client, token_url: str, data: dict[str, str]) -> OAuthToken:
    response = _post_token(http, token_url, data)

    if response.status_code != 200:
        logger.debug(f"OAuth token request failed: {response.status_code}")
        raise AuthenticationError(
            response.status_code,
            message=response.text[:500],
            body=response.content,
            method="POST",
            url=token_url,
        )

    try:
        payload = response.json()
        expires_in = payload.get("expires_in")
        return OAuthToken(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token") or "",
            expires_at=time.time() + float(expires_in) if expires_in else None,
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.debug(f"Unusable OAuth token response from {token_url}: {e}")
        raise DecodeError(f"failed to decode OAuth token response: {e!r}", response=Response(response)) from e
