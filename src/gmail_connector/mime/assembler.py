"""Outbound MIME assembly.

A :class:`~gmail_connector.models.Message` is turned into the nested document

    multipart/mixed              To, Subject, From, Cc, Bcc
      multipart/related
        multipart/alternative
          text/plain
          text/html
        inline images ...
      attachments ...

and then base64url-encoded for the ``raw`` field of ``messages.send``.
Parts with an empty body are left out, and so is any container that ends up
with nothing in it.
"""

from __future__ import annotations

import base64
import binascii
import quopri
import uuid
from email.header import Header
from email.message import Message as EmailMessage
from email.utils import formataddr, getaddresses

import structlog

from gmail_connector.exceptions import EncodingError
from gmail_connector.mime.nodes import (
    CRLF,
    MimeLeaf,
    MimeMultipart,
    MimeNode,
    check_header_value,
    prune,
    render,
)
from gmail_connector.models import Message, MessageBodyPart

logger = structlog.get_logger()


def _transfer_encode(part: MessageBodyPart) -> str:
    """Return the body of ``part`` in its declared transfer encoding.

    Only quoted-printable is applied here; base64 parts are already encoded
    by their factories.

    Raises:
        EncodingError: If the body cannot be represented in the part's charset.
    """
    if part.headers.get("Content-Transfer-Encoding", "").lower() != "quoted-printable":
        return part.body

    content_type = EmailMessage()
    content_type["Content-Type"] = part.headers.get("Content-Type", "text/plain")
    charset = content_type.get_content_charset("utf-8")
    text = part.body.replace("\r\n", "\n").replace("\r", "\n")
    try:
        return quopri.encodestring(text.encode(charset)).decode("ascii")
    except (UnicodeError, LookupError) as exc:
        logger.error("mime_part_encoding_failed", charset=charset, error=str(exc))
        raise EncodingError(f"Failed to encode {charset} text part: {exc}", cause=exc) from exc


def _leaf(part: MessageBodyPart | None) -> list[MimeNode]:
    if part is None:
        return []
    return [MimeLeaf(headers=dict(part.headers), body=_transfer_encode(part))]


def _encode_header_value(value: str) -> str:
    # Non-ASCII header text goes out as RFC 2047 encoded words, folded with CRLF.
    if value.isascii():
        return value
    return Header(value, "utf-8").encode(linesep=CRLF)


def _encode_address_list(value: str) -> str:
    # Only the display names are encoded; addresses stay as written.
    if value.isascii():
        return value
    return ", ".join(
        formataddr((name, address), charset="utf-8") for name, address in getaddresses([value])
    )


class MimeAssembler:
    """Builds and encodes outbound MIME documents.

    Boundary tokens are fixed for the lifetime of an instance, so the same
    message always produces the same bytes. Pass ``boundaries`` as
    ``(mixed, related, alternative)`` to pin them explicitly.
    """

    def __init__(self, boundaries: tuple[str, str, str] | None = None) -> None:
        if boundaries is None:
            token = uuid.uuid4().hex
            boundaries = (f"mixed_{token}", f"related_{token}", f"alternative_{token}")
        if len(set(boundaries)) != 3:
            raise ValueError("MIME boundaries must be three distinct tokens")
        self.mixed_boundary, self.related_boundary, self.alternative_boundary = boundaries

    def build(self, message: Message) -> MimeMultipart:
        """Build the full part tree for ``message``, before pruning."""
        alternative = MimeMultipart(
            subtype="alternative",
            boundary=self.alternative_boundary,
            children=tuple(_leaf(message.plain_text_body_part) + _leaf(message.html_body_part)),
        )
        related = MimeMultipart(
            subtype="related",
            boundary=self.related_boundary,
            children=(alternative, *(n for p in message.inline_image_parts for n in _leaf(p))),
        )
        return MimeMultipart(
            subtype="mixed",
            boundary=self.mixed_boundary,
            children=(related, *(n for p in message.attachment_parts for n in _leaf(p))),
            headers=self._envelope_headers(message),
        )

    def render(self, message: Message) -> str:
        """Return the MIME document for ``message`` as text."""
        tree = self.build(message)
        pruned = prune(tree)
        if pruned is None:
            # Nothing to enclose: headers only, no separators.
            pruned = MimeMultipart(subtype="mixed", boundary=tree.boundary, headers=tree.headers)
        return render(pruned)

    def encode(self, message: Message) -> str:
        """Return the base64url encoding of the MIME document for ``message``.

        Raises:
            EncodingError: If the document cannot be encoded.
        """
        document = self.render(message)
        try:
            encoded = base64.urlsafe_b64encode(document.encode("utf-8")).decode("ascii")
        except (UnicodeError, binascii.Error) as exc:
            logger.error("mime_encoding_failed", error=str(exc))
            raise EncodingError(f"Failed to encode message: {exc}", cause=exc) from exc

        logger.debug(
            "mime_document_assembled",
            inline_images=len(message.inline_image_parts),
            attachments=len(message.attachment_parts),
            encoded_length=len(encoded),
        )
        return encoded

    def _envelope_headers(self, message: Message) -> dict[str, str]:
        headers = {
            "To": _encode_address_list(check_header_value("To", message.to)),
            "Subject": _encode_header_value(check_header_value("Subject", message.subject)),
        }
        for name, value in (("From", message.sender), ("Cc", message.cc), ("Bcc", message.bcc)):
            if value:
                headers[name] = _encode_address_list(check_header_value(name, value))
        headers["MIME-Version"] = "1.0"
        return headers
