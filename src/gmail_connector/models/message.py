"""Message, thread and profile models.

Outbound messages are described with the structured fields (recipients,
subject, body parts); inbound messages are produced by
:mod:`gmail_connector.gmail.mapping` and carry the Gmail bookkeeping fields as
well.
"""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

BASE64_LINE_LENGTH = 76


def _wrap_base64(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return "\r\n".join(
        encoded[i : i + BASE64_LINE_LENGTH] for i in range(0, len(encoded), BASE64_LINE_LENGTH)
    )


class MessageBodyPart(BaseModel):
    """One leaf MIME part: ordered headers plus a body payload.

    The body is text for ``text/*`` parts and base64 for binary content.
    """

    model_config = ConfigDict(frozen=True)

    headers: dict[str, str] = Field(default_factory=dict, description="Part headers, in order")
    body: str = Field(default="", description="Text or base64 payload")

    # Populated for inbound parts only.
    part_id: str | None = Field(default=None, description="Gmail part id")
    mime_type: str | None = Field(default=None, description="Content type of the part")
    file_name: str | None = Field(default=None, description="Attachment file name")
    attachment_id: str | None = Field(
        default=None, description="Id to pass to get_attachment when the body was not inlined"
    )
    size: int = Field(default=0, description="Body size in bytes as reported by Gmail")

    @classmethod
    def text(cls, body: str, subtype: str = "plain", charset: str = "UTF-8") -> MessageBodyPart:
        """Build a ``text/<subtype>`` part.

        ``body`` is kept as text; the assembler applies the quoted-printable
        transfer encoding declared here when the part is written.
        """
        return cls(
            headers={
                "Content-Type": f'text/{subtype}; charset="{charset}"',
                "Content-Transfer-Encoding": "quoted-printable",
            },
            body=body,
            mime_type=f"text/{subtype}",
        )

    @classmethod
    def html(cls, body: str, charset: str = "UTF-8") -> MessageBodyPart:
        return cls.text(body, subtype="html", charset=charset)

    @classmethod
    def inline_image(
        cls,
        data: bytes,
        mime_type: str,
        file_name: str,
        content_id: str | None = None,
    ) -> MessageBodyPart:
        """Build an image part the HTML body can reference as ``cid:<content_id>``.

        ``content_id`` defaults to the file name.
        """
        return cls(
            headers={
                "Content-Type": f'{mime_type}; name="{file_name}"',
                "Content-Disposition": f'inline; filename="{file_name}"',
                "Content-Transfer-Encoding": "base64",
                "Content-ID": f"<{content_id or file_name}>",
            },
            body=_wrap_base64(data),
            mime_type=mime_type,
            file_name=file_name,
            size=len(data),
        )

    @classmethod
    def attachment(cls, data: bytes, mime_type: str, file_name: str) -> MessageBodyPart:
        """Build a downloadable attachment part."""
        return cls(
            headers={
                "Content-Type": f'{mime_type}; name="{file_name}"',
                "Content-Disposition": f'attachment; filename="{file_name}"',
                "Content-Transfer-Encoding": "base64",
            },
            body=_wrap_base64(data),
            mime_type=mime_type,
            file_name=file_name,
            size=len(data),
        )

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        inline: bool = False,
        mime_type: str | None = None,
    ) -> MessageBodyPart:
        """Read a file from disk into an attachment (or inline image) part.

        The content type is guessed from the file extension when not given.
        """
        file_path = Path(path)
        resolved_type = mime_type or mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        data = file_path.read_bytes()
        if inline:
            return cls.inline_image(data, resolved_type, file_path.name)
        return cls.attachment(data, resolved_type, file_path.name)


class Message(BaseModel):
    """A single email, outbound or as returned by Gmail."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Gmail message ID")
    thread_id: str = Field(default="", description="Gmail thread ID")
    label_ids: list[str] = Field(default_factory=list, description="Gmail label IDs")
    snippet: str = Field(default="", description="Short plain-text excerpt")
    history_id: str = Field(default="", description="Last history record that modified this message")
    internal_date: int | None = Field(
        default=None, description="Internal timestamp in milliseconds since epoch"
    )
    size_estimate: int = Field(default=0, description="Estimated size in bytes")
    raw: str | None = Field(
        default=None, description="base64url RFC 2822 message, present for format=raw reads"
    )

    subject: str = Field(default="", description="Subject header")
    sender: str | None = Field(default=None, description="From header")
    to: str = Field(default="", description="To header")
    cc: str | None = Field(default=None, description="Cc header")
    bcc: str | None = Field(default=None, description="Bcc header")
    headers: dict[str, str] = Field(
        default_factory=dict, description="All top-level headers of an inbound message"
    )
    mime_type: str | None = Field(default=None, description="Top-level content type")

    plain_text_body_part: MessageBodyPart | None = None
    html_body_part: MessageBodyPart | None = None
    inline_image_parts: list[MessageBodyPart] = Field(default_factory=list)
    attachment_parts: list[MessageBodyPart] = Field(default_factory=list)


class MessageAttachment(BaseModel):
    """Attachment body fetched with ``get_attachment``."""

    model_config = ConfigDict(frozen=True)

    attachment_id: str = Field(default="", description="Attachment ID")
    size: int = Field(default=0, description="Size in bytes")
    data: str = Field(default="", description="base64url encoded content")

    def decoded(self) -> bytes:
        """Return the attachment bytes."""
        padding = (-len(self.data)) % 4
        return base64.urlsafe_b64decode(self.data + "=" * padding)


class Thread(BaseModel):
    """A conversation and its messages, oldest first."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Gmail thread ID")
    snippet: str = Field(default="", description="Short excerpt of the thread")
    history_id: str = Field(default="", description="Last history record that modified this thread")
    messages: list[Message] = Field(default_factory=list)


class MessageListPage(BaseModel):
    """One page of a message listing."""

    model_config = ConfigDict(frozen=True)

    messages: list[Message] = Field(default_factory=list)
    result_size_estimate: int = Field(default=0)
    next_page_token: str | None = Field(default=None)


class ThreadListPage(BaseModel):
    """One page of a thread listing."""

    model_config = ConfigDict(frozen=True)

    threads: list[Thread] = Field(default_factory=list)
    result_size_estimate: int = Field(default=0)
    next_page_token: str | None = Field(default=None)


class UserProfile(BaseModel):
    """Mailbox owner profile."""

    model_config = ConfigDict(frozen=True)

    email_address: str = Field(default="", description="Account email address")
    messages_total: int = Field(default=0)
    threads_total: int = Field(default=0)
    history_id: str = Field(default="")


class SendResult(BaseModel):
    """Identifiers Gmail assigned to a sent message."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    thread_id: str
    label_ids: list[str] = Field(default_factory=list)
