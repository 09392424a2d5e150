"""Outbound MIME document assembly."""

from gmail_connector.mime.assembler import MimeAssembler
from gmail_connector.mime.nodes import MimeLeaf, MimeMultipart, prune, render

__all__ = ["MimeAssembler", "MimeLeaf", "MimeMultipart", "prune", "render"]
