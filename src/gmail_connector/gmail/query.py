"""Resource paths and query strings for the Gmail REST API."""

from __future__ import annotations

from urllib.parse import quote

from gmail_connector.exceptions import QueryEncodingError
from gmail_connector.models import MessageThreadFilter, SearchFilter

DEFAULT_CHARSET = "utf-8"


def percent_encode(value: str, charset: str = DEFAULT_CHARSET) -> str:
    """Percent-encode ``value`` for use as a single query parameter value.

    Raises:
        QueryEncodingError: If ``value`` cannot be represented in ``charset``.
    """
    try:
        return quote(value, safe="", encoding=charset)
    except (UnicodeError, LookupError) as exc:
        raise QueryEncodingError(
            f"Failed to encode query value with charset {charset}: {exc}", cause=exc
        ) from exc


def search_query(search: SearchFilter, charset: str = DEFAULT_CHARSET) -> str:
    """Build the query string for a list call; empty when nothing is set."""
    params: list[tuple[str, str]] = []
    if search.include_spam_trash:
        params.append(("includeSpamTrash", "true"))
    for label_id in search.label_ids:
        params.append(("labelIds", percent_encode(label_id)))
    if search.max_results is not None:
        params.append(("maxResults", str(search.max_results)))
    if search.page_token:
        params.append(("pageToken", percent_encode(search.page_token)))
    if search.query:
        params.append(("q", percent_encode(search.query, charset)))
    return "&".join(f"{name}={value}" for name, value in params)


def read_query(read_filter: MessageThreadFilter | None) -> str:
    """Build the query string for a single message or thread read."""
    if read_filter is None:
        return ""
    params: list[tuple[str, str]] = []
    if read_filter.format is not None:
        params.append(("format", read_filter.format.value))
    for header in read_filter.metadata_headers:
        params.append(("metadataHeaders", percent_encode(header)))
    return "&".join(f"{name}={value}" for name, value in params)


def with_query(path: str, query: str) -> str:
    return f"{path}?{query}" if query else path


def _user(user_id: str) -> str:
    return f"/users/{quote(user_id, safe='@')}"


def _segment(value: str) -> str:
    return quote(value, safe="")


def messages_path(user_id: str) -> str:
    return f"{_user(user_id)}/messages"


def message_path(user_id: str, message_id: str, action: str | None = None) -> str:
    path = f"{messages_path(user_id)}/{_segment(message_id)}"
    return f"{path}/{action}" if action else path


def attachment_path(user_id: str, message_id: str, attachment_id: str) -> str:
    return f"{message_path(user_id, message_id)}/attachments/{_segment(attachment_id)}"


def send_path(user_id: str) -> str:
    return f"{messages_path(user_id)}/send"


def threads_path(user_id: str) -> str:
    return f"{_user(user_id)}/threads"


def thread_path(user_id: str, thread_id: str, action: str | None = None) -> str:
    path = f"{threads_path(user_id)}/{_segment(thread_id)}"
    return f"{path}/{action}" if action else path


def profile_path(user_id: str) -> str:
    return f"{_user(user_id)}/profile"
