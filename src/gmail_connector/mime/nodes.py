"""Structured MIME part nodes and the recursive writer that renders them.

A document is a tree of :class:`MimeMultipart` containers whose leaves are
:class:`MimeLeaf` parts. Boundary placement is derived from the tree, so a
container only ever writes separators for children it actually holds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Union

from gmail_connector.exceptions import EncodingError

CRLF = "\r\n"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def check_header_value(name: str, value: str) -> str:
    """Return ``value`` unchanged, or raise if it would start a new header line.

    Raises:
        EncodingError: If ``value`` contains a CR or LF.
    """
    if "\r" in value or "\n" in value:
        raise EncodingError(f"Header {name} must not contain line breaks")
    return value


@dataclass(frozen=True)
class MimeLeaf:
    """A single part: headers written verbatim, then the body."""

    headers: Mapping[str, str]
    body: str

    def is_empty(self) -> bool:
        return not self.body


@dataclass(frozen=True)
class MimeMultipart:
    """A ``multipart/<subtype>`` container.

    ``headers`` are written before the generated Content-Type header; the outer
    envelope uses them for To, Subject and friends.
    """

    subtype: str
    boundary: str
    children: tuple["MimeNode", ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        return f'multipart/{self.subtype}; boundary="{self.boundary}"'

    def is_empty(self) -> bool:
        return not self.children


MimeNode = Union[MimeLeaf, MimeMultipart]


def prune(node: MimeNode) -> MimeNode | None:
    """Drop empty leaves, then containers left without children.

    Returns ``None`` when nothing in ``node`` has content.
    """
    if isinstance(node, MimeLeaf):
        return None if node.is_empty() else node

    children = tuple(child for child in (prune(c) for c in node.children) if child is not None)
    if not children:
        return None
    return MimeMultipart(
        subtype=node.subtype,
        boundary=node.boundary,
        children=children,
        headers=node.headers,
    )


def render_lines(node: MimeNode) -> list[str]:
    """Render ``node`` and its descendants as a list of lines (no terminators)."""
    if isinstance(node, MimeLeaf):
        lines = [f"{name}: {check_header_value(name, value)}" for name, value in node.headers.items()]
        lines.append("")
        lines.extend(_LINE_BREAK.split(node.body))
        return lines

    # Container headers are built by the assembler and may carry folded lines.
    lines = [f"{name}: {value}" for name, value in node.headers.items()]
    lines.append(f"Content-Type: {node.content_type}")
    lines.append("")
    for child in node.children:
        lines.append(f"--{node.boundary}")
        lines.extend(render_lines(child))
    if node.children:
        lines.append(f"--{node.boundary}--")
    return lines


def render(node: MimeNode) -> str:
    """Render ``node`` as a CRLF-delimited document."""
    return CRLF.join(render_lines(node)) + CRLF
