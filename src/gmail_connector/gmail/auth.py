"""OAuth2 credential loading for the Gmail API."""

from __future__ import annotations

from pathlib import Path

import structlog
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gmail_connector.config import Settings
from gmail_connector.exceptions import AuthenticationError, ConfigurationError

logger = structlog.get_logger()


def load_credentials(settings: Settings) -> Credentials:
    """Return valid user credentials, refreshing or re-authorizing as needed.

    A cached token is used when present. An expired token with a refresh token
    is refreshed; otherwise the interactive local-server flow runs and the new
    token is written back to ``settings.gmail_token_path``.

    Raises:
        ConfigurationError: If the client secrets file is missing and a new
            authorization is required.
        AuthenticationError: If refreshing or authorizing fails.
    """
    credentials_path = Path(settings.gmail_credentials_path)
    token_path = Path(settings.gmail_token_path)
    scopes = list(settings.gmail_scopes)

    logger.info(
        "gmail_authentication_started",
        credentials_path=str(credentials_path),
        token_path=str(token_path),
        scopes=scopes,
    )

    creds: Credentials | None = None
    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), scopes=scopes)

    try:
        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            if not credentials_path.exists():
                raise ConfigurationError(
                    f"Gmail credentials file not found: {credentials_path}. "
                    "Download an OAuth client secrets file from the Google Cloud console."
                )
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")
    except GoogleAuthError as exc:
        logger.exception("gmail_authentication_failed", error=str(exc))
        raise AuthenticationError(str(exc), cause=exc) from exc

    logger.info("gmail_authentication_completed")
    return creds
