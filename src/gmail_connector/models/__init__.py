"""Data models for Gmail Connector.

This module contains Pydantic models for data validation and serialization.
"""

from gmail_connector.models.filters import MessageFormat, MessageThreadFilter, SearchFilter
from gmail_connector.models.message import (
    Message,
    MessageAttachment,
    MessageBodyPart,
    MessageListPage,
    SendResult,
    Thread,
    ThreadListPage,
    UserProfile,
)

__all__ = [
    "Message",
    "MessageAttachment",
    "MessageBodyPart",
    "MessageFormat",
    "MessageListPage",
    "MessageThreadFilter",
    "SearchFilter",
    "SendResult",
    "Thread",
    "ThreadListPage",
    "UserProfile",
]
