"""Authenticated HTTP transport for the Gmail REST API.

The connector only depends on the small :class:`Transport` protocol, so tests
can substitute an in-memory implementation. The production implementation is
a thin wrapper around :class:`google.auth.transport.requests.AuthorizedSession`,
which attaches the bearer token and refreshes it transparently.
"""

from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass
from typing import Any, Protocol

import requests
import structlog
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession

from gmail_connector.config import Settings
from gmail_connector.exceptions import AuthenticationError, TransportError

logger = structlog.get_logger()


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of an HTTP response."""

    status_code: int
    content: bytes = b""
    reason: str = ""

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON.
        """
        return jsonlib.loads(self.content)


class Transport(Protocol):
    """Minimal verb-level interface the connector needs."""

    def get(self, path: str) -> TransportResponse: ...

    def post(self, path: str, json: Any | None = None) -> TransportResponse: ...

    def delete(self, path: str) -> TransportResponse: ...


class AuthorizedSessionTransport:
    """Transport backed by a google-auth ``AuthorizedSession``.

    The session is safe to share between concurrent calls; each request is
    independent.
    """

    def __init__(self, session: AuthorizedSession, base_url: str, timeout: float = 30.0) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthorizedSessionTransport:
        """Load OAuth2 credentials and open a session against ``settings.api_base_url``."""
        from gmail_connector.gmail.auth import load_credentials

        credentials = load_credentials(settings)
        return cls(
            AuthorizedSession(credentials),
            settings.api_base_url,
            timeout=settings.request_timeout,
        )

    def get(self, path: str) -> TransportResponse:
        return self._send("GET", path)

    def post(self, path: str, json: Any | None = None) -> TransportResponse:
        return self._send("POST", path, json=json)

    def delete(self, path: str) -> TransportResponse:
        return self._send("DELETE", path)

    def _send(self, method: str, path: str, json: Any | None = None) -> TransportResponse:
        url = f"{self._base_url}{path}"
        logger.debug("gmail_request", method=method, path=path)
        try:
            response = self._session.request(method, url, json=json, timeout=self._timeout)
        except requests.RequestException as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            logger.exception("gmail_request_failed", method=method, path=path, error=str(exc))
            raise TransportError(
                f"{method} {path} failed: {exc}", status_code=status_code, cause=exc
            ) from exc
        except GoogleAuthError as exc:
            logger.exception("gmail_token_refresh_failed", method=method, path=path, error=str(exc))
            raise AuthenticationError(str(exc), cause=exc) from exc

        logger.debug("gmail_response", method=method, path=path, status_code=response.status_code)
        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            reason=response.reason or "",
        )
