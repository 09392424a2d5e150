"""Request shaping options for list and read operations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageFormat(str, Enum):
    """Representation Gmail returns for a single message or thread."""

    FULL = "full"
    METADATA = "metadata"
    MINIMAL = "minimal"
    RAW = "raw"


class SearchFilter(BaseModel):
    """Query parameters for listing messages or threads.

    Absent values are ``None`` (or empty for ``label_ids``) and contribute
    nothing to the request.
    """

    model_config = ConfigDict(frozen=True)

    include_spam_trash: bool = Field(
        default=False, description="Include messages from SPAM and TRASH"
    )
    label_ids: tuple[str, ...] = Field(
        default=(), description="Only return items carrying all of these labels"
    )
    max_results: int | None = Field(default=None, ge=1, description="Page size")
    page_token: str | None = Field(default=None, description="Continuation token")
    query: str | None = Field(
        default=None, description="Gmail search box query, e.g. 'from:a@x.com is:unread'"
    )


class MessageThreadFilter(BaseModel):
    """Response shaping for single message and thread reads."""

    model_config = ConfigDict(frozen=True)

    format: MessageFormat | None = Field(default=None, description="Response format")
    metadata_headers: tuple[str, ...] = Field(
        default=(),
        description="Headers to include when format is metadata",
    )
