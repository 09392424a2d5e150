"""Gmail Connector - a typed client for the Gmail REST API.

This package maps Gmail message, thread and profile operations onto async
Python calls and Pydantic models, and assembles outbound multipart MIME
messages for sending.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from gmail_connector.config import Settings, get_settings
from gmail_connector.exceptions import GMailError
from gmail_connector.gmail.client import GmailConnector

__all__ = ["GMailError", "GmailConnector", "Settings", "get_settings", "__version__", "__author__"]
