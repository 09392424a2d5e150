"""Gmail REST API access: transport, request building and response mapping."""

from gmail_connector.gmail.client import GmailConnector
from gmail_connector.gmail.transport import AuthorizedSessionTransport, Transport, TransportResponse

__all__ = ["AuthorizedSessionTransport", "GmailConnector", "Transport", "TransportResponse"]
