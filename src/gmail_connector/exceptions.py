"""Custom exceptions for Gmail Connector.

Every operation reports failure through :class:`GMailError` (or one of its
subclasses), which carries a human-readable message, the HTTP status code when
one is known, and the underlying cause.
"""

from __future__ import annotations


class GmailConnectorError(Exception):
    """Base exception for all Gmail Connector errors."""


class GMailError(GmailConnectorError):
    """Uniform failure raised by connector operations."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class TransportError(GMailError):
    """Exception raised when the request never produced an HTTP response."""


class PayloadError(GMailError):
    """Exception raised when a response body is not valid JSON."""


class ApiError(GMailError):
    """Exception raised when Gmail answers with a non-success status."""


class EncodingError(GMailError):
    """Exception raised when an outbound MIME document cannot be encoded."""


class QueryEncodingError(GMailError):
    """Exception raised when a search query cannot be percent-encoded."""


class ConfigurationError(GMailError):
    """Exception raised for configuration related errors."""


class AuthenticationError(GMailError):
    """Exception raised for authentication failures."""
