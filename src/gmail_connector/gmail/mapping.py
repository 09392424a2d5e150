"""Helpers for mapping Gmail API JSON into internal models.

Gmail omits fields freely. Every lookup goes through :func:`_field`, which
substitutes the documented default when a key is absent or null.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterator, Mapping
from typing import Any, TypeVar

from gmail_connector.models import (
    Message,
    MessageAttachment,
    MessageBodyPart,
    MessageListPage,
    SendResult,
    Thread,
    ThreadListPage,
    UserProfile,
)

T = TypeVar("T")


def _field(data: Mapping[str, Any], key: str, default: T) -> T:
    value = data.get(key)
    return default if value is None else value


def _object(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _objects(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    # Entries that are not JSON objects are skipped.
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _int_field(data: Mapping[str, Any], key: str, default: int | None = 0) -> int | None:
    # Gmail encodes int64 values (internalDate, sizes) as JSON strings.
    value = data.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _header_map(part: Mapping[str, Any]) -> dict[str, str]:
    result: dict[str, str] = {}
    for h in _objects(part, "headers"):
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates (Received, ...); keep the first.
            result.setdefault(name, value)
    return result


def _header(headers: Mapping[str, str], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _decode_text(data: str) -> str:
    if not data:
        return ""
    padding = (-len(data)) % 4
    try:
        raw = base64.urlsafe_b64decode(data + "=" * padding)
    except (binascii.Error, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def _walk_parts(part: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    """Yield leaf parts depth-first, in document order."""
    children = _objects(part, "parts")
    if not children:
        yield part
        return
    for child in children:
        yield from _walk_parts(child)


def _body_part(part: Mapping[str, Any], *, decode: bool) -> MessageBodyPart:
    body = _object(part, "body")
    data = _field(body, "data", "")
    return MessageBodyPart(
        headers=_header_map(part),
        body=_decode_text(data) if decode else data,
        part_id=part.get("partId"),
        mime_type=part.get("mimeType"),
        file_name=_field(part, "filename", "") or None,
        attachment_id=body.get("attachmentId"),
        size=_int_field(body, "size") or 0,
    )


def _is_inline(part: Mapping[str, Any], headers: Mapping[str, str]) -> bool:
    disposition = (_header(headers, "Content-Disposition") or "").strip().lower()
    if disposition.startswith("inline"):
        return True
    if disposition.startswith("attachment"):
        return False
    mime_type = _field(part, "mimeType", "")
    return bool(_header(headers, "Content-ID")) and mime_type.startswith("image/")


def message_from_json(data: Mapping[str, Any]) -> Message:
    """Convert a Gmail API message resource to :class:`Message`.

    Args:
        data: Gmail API message dict, in any read format.

    Returns:
        Message: The flattened message.
    """
    payload = _object(data, "payload")
    headers = _header_map(payload)

    plain: MessageBodyPart | None = None
    html: MessageBodyPart | None = None
    inline_images: list[MessageBodyPart] = []
    attachments: list[MessageBodyPart] = []

    if payload:
        for part in _walk_parts(payload):
            mime_type = _field(part, "mimeType", "")
            file_name = _field(part, "filename", "")
            has_attachment_id = bool(_object(part, "body").get("attachmentId"))

            if not file_name and not has_attachment_id:
                if mime_type == "text/plain" and plain is None:
                    plain = _body_part(part, decode=True)
                elif mime_type == "text/html" and html is None:
                    html = _body_part(part, decode=True)
                continue

            part_headers = _header_map(part)
            if _is_inline(part, part_headers):
                inline_images.append(_body_part(part, decode=False))
            else:
                attachments.append(_body_part(part, decode=False))

    label_ids = _field(data, "labelIds", [])

    return Message(
        id=str(_field(data, "id", "")),
        thread_id=str(_field(data, "threadId", "")),
        label_ids=[str(x) for x in label_ids if isinstance(x, str)],
        snippet=_field(data, "snippet", ""),
        history_id=str(_field(data, "historyId", "")),
        internal_date=_int_field(data, "internalDate", None),
        size_estimate=_int_field(data, "sizeEstimate") or 0,
        raw=data.get("raw"),
        subject=_header(headers, "Subject") or "",
        sender=_header(headers, "From"),
        to=_header(headers, "To") or "",
        cc=_header(headers, "Cc"),
        bcc=_header(headers, "Bcc"),
        headers=headers,
        mime_type=payload.get("mimeType"),
        plain_text_body_part=plain,
        html_body_part=html,
        inline_image_parts=inline_images,
        attachment_parts=attachments,
    )


def thread_from_json(data: Mapping[str, Any]) -> Thread:
    """Convert a Gmail API thread resource to :class:`Thread`."""
    return Thread(
        id=str(_field(data, "id", "")),
        snippet=_field(data, "snippet", ""),
        history_id=str(_field(data, "historyId", "")),
        messages=[message_from_json(m) for m in _objects(data, "messages")],
    )


def item_ids(data: Mapping[str, Any], key: str) -> list[str]:
    """Return the ids listed under ``key`` ("messages" or "threads"), in order."""
    return [str(item["id"]) for item in _objects(data, key) if item.get("id")]


def message_list_page(data: Mapping[str, Any], messages: list[Message]) -> MessageListPage:
    return MessageListPage(
        messages=messages,
        result_size_estimate=_int_field(data, "resultSizeEstimate") or 0,
        next_page_token=data.get("nextPageToken"),
    )


def thread_list_page(data: Mapping[str, Any], threads: list[Thread]) -> ThreadListPage:
    return ThreadListPage(
        threads=threads,
        result_size_estimate=_int_field(data, "resultSizeEstimate") or 0,
        next_page_token=data.get("nextPageToken"),
    )


def attachment_from_json(data: Mapping[str, Any], attachment_id: str) -> MessageAttachment:
    """Convert a ``messages.attachments.get`` response.

    Gmail does not always echo the attachment id, so the requested one is used
    as the fallback.
    """
    return MessageAttachment(
        attachment_id=str(_field(data, "attachmentId", attachment_id)),
        size=_int_field(data, "size") or 0,
        data=_field(data, "data", ""),
    )


def profile_from_json(data: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        email_address=_field(data, "emailAddress", ""),
        messages_total=_int_field(data, "messagesTotal") or 0,
        threads_total=_int_field(data, "threadsTotal") or 0,
        history_id=str(_field(data, "historyId", "")),
    )


def send_result_from_json(data: Mapping[str, Any]) -> SendResult:
    return SendResult(
        message_id=str(_field(data, "id", "")),
        thread_id=str(_field(data, "threadId", "")),
        label_ids=list(_field(data, "labelIds", [])),
    )


def error_message(data: Any) -> str | None:
    """Extract ``error.message`` from a Gmail error body, if present."""
    if not isinstance(data, Mapping):
        return None
    error = data.get("error")
    if isinstance(error, Mapping):
        message = error.get("message")
        return message if isinstance(message, str) else None
    return None
