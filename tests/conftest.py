"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import base64
import json
from typing import Any

import pytest

from gmail_connector.gmail.transport import TransportResponse

NOT_FOUND = TransportResponse(
    status_code=404,
    content=b'{"error": {"code": 404, "message": "Not Found"}}',
    reason="Not Found",
)


def b64url(text: str | bytes) -> str:
    data = text.encode("utf-8") if isinstance(text, str) else text
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def json_response(body: Any, status_code: int = 200) -> TransportResponse:
    return TransportResponse(status_code=status_code, content=json.dumps(body).encode("utf-8"))


class FakeTransport:
    """In-memory transport that records calls and replays canned responses."""

    def __init__(self, default: TransportResponse | None = None) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self._routes: dict[tuple[str, str], TransportResponse | Exception] = {}
        self._default = default

    def add(self, method: str, path: str, response: TransportResponse | Exception) -> None:
        self._routes[(method, path)] = response

    def get(self, path: str) -> TransportResponse:
        return self._respond("GET", path, None)

    def post(self, path: str, json: Any | None = None) -> TransportResponse:
        return self._respond("POST", path, json)

    def delete(self, path: str) -> TransportResponse:
        return self._respond("DELETE", path, None)

    def _respond(self, method: str, path: str, body: Any) -> TransportResponse:
        self.calls.append((method, path, body))
        response = self._routes.get((method, path), self._default)
        if response is None:
            raise AssertionError(f"Unexpected request: {method} {path}")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from gmail_connector.config import Settings

    return Settings(
        api_base_url="https://gmail.test/gmail/v1",
        user_id="me",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def connector(mock_settings, fake_transport):
    from gmail_connector.gmail.client import GmailConnector
    from gmail_connector.mime import MimeAssembler

    return GmailConnector(
        mock_settings,
        transport=fake_transport,
        assembler=MimeAssembler(boundaries=("mixed-b", "related-b", "alternative-b")),
    )


@pytest.fixture
def sample_message_data() -> dict:
    """Provide a format=full Gmail message with nested parts."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "Weekly report attached",
        "historyId": "4242",
        "internalDate": "1700000000000",
        "sizeEstimate": 20480,
        "payload": {
            "partId": "",
            "mimeType": "multipart/mixed",
            "filename": "",
            "headers": [
                {"name": "Subject", "value": "Weekly report"},
                {"name": "From", "value": "Reports <reports@example.com>"},
                {"name": "To", "value": "user@example.com"},
                {"name": "Cc", "value": "boss@example.com"},
                {"name": "Received", "value": "first"},
                {"name": "Received", "value": "second"},
            ],
            "body": {"size": 0},
            "parts": [
                {
                    "partId": "0",
                    "mimeType": "multipart/related",
                    "filename": "",
                    "body": {"size": 0},
                    "parts": [
                        {
                            "partId": "0.0",
                            "mimeType": "multipart/alternative",
                            "filename": "",
                            "body": {"size": 0},
                            "parts": [
                                {
                                    "partId": "0.0.0",
                                    "mimeType": "text/plain",
                                    "filename": "",
                                    "headers": [
                                        {"name": "Content-Type", "value": "text/plain; charset=UTF-8"}
                                    ],
                                    "body": {"size": 13, "data": b64url("Report inside")},
                                },
                                {
                                    "partId": "0.0.1",
                                    "mimeType": "text/html",
                                    "filename": "",
                                    "headers": [
                                        {"name": "Content-Type", "value": "text/html; charset=UTF-8"}
                                    ],
                                    "body": {"size": 20, "data": b64url("<p>Report inside</p>")},
                                },
                            ],
                        },
                        {
                            "partId": "0.1",
                            "mimeType": "image/png",
                            "filename": "logo.png",
                            "headers": [
                                {"name": "Content-Type", "value": 'image/png; name="logo.png"'},
                                {"name": "Content-ID", "value": "<logo.png>"},
                            ],
                            "body": {"size": 4, "data": b64url(b"\x89PNG")},
                        },
                    ],
                },
                {
                    "partId": "1",
                    "mimeType": "application/pdf",
                    "filename": "report.pdf",
                    "headers": [
                        {"name": "Content-Type", "value": 'application/pdf; name="report.pdf"'},
                        {"name": "Content-Disposition", "value": 'attachment; filename="report.pdf"'},
                    ],
                    "body": {"size": 20000, "attachmentId": "att-1"},
                },
            ],
        },
    }
