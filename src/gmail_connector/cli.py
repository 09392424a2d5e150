"""Command-line interface for Gmail Connector.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from gmail_connector.config import get_settings
from gmail_connector.exceptions import GMailError
from gmail_connector.gmail.client import GmailConnector
from gmail_connector.models import (
    Message,
    MessageBodyPart,
    MessageFormat,
    MessageThreadFilter,
    SearchFilter,
)

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gmail-connector", description="Gmail Connector")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("profile", help="Show the mailbox profile")

    messages_parser = subparsers.add_parser("messages", help="List, read, send and trash messages")
    messages_sub = messages_parser.add_subparsers(dest="messages_command", required=True)

    list_parser = messages_sub.add_parser("list", help="List one page of messages")
    list_parser.add_argument(
        "--query",
        default=None,
        help="Optional Gmail search query (same syntax as Gmail search box)",
    )
    list_parser.add_argument(
        "--label",
        dest="labels",
        action="append",
        default=[],
        help="Only list messages with this label ID (repeatable)",
    )
    list_parser.add_argument("--max-results", type=int, default=None, help="Page size")
    list_parser.add_argument("--page-token", default=None, help="Continuation token")
    list_parser.add_argument(
        "--include-spam-trash",
        action="store_true",
        help="Include messages from SPAM and TRASH",
    )

    read_parser = messages_sub.add_parser("read", help="Show one message")
    read_parser.add_argument("message_id", help="Gmail message ID")
    read_parser.add_argument(
        "--format",
        choices=[f.value for f in MessageFormat],
        default=None,
        help="Response format (default: full)",
    )

    send_parser = messages_sub.add_parser("send", help="Send a message")
    send_parser.add_argument("--to", required=True, help="Recipient address(es)")
    send_parser.add_argument("--subject", required=True, help="Subject line")
    send_parser.add_argument("--from", dest="sender", default=None, help="From address")
    send_parser.add_argument("--cc", default=None, help="Cc address(es)")
    send_parser.add_argument("--bcc", default=None, help="Bcc address(es)")
    send_parser.add_argument("--text", default="", help="Plain-text body")
    send_parser.add_argument("--html", default="", help="HTML body")
    send_parser.add_argument(
        "--attach", type=Path, action="append", default=[], help="File to attach (repeatable)"
    )
    send_parser.add_argument(
        "--inline",
        type=Path,
        action="append",
        default=[],
        help="Image to embed; reference it from HTML as cid:<file name> (repeatable)",
    )
    send_parser.add_argument("--thread-id", default=None, help="Add the message to this thread")

    for action in ("trash", "untrash", "delete"):
        action_parser = messages_sub.add_parser(action, help=f"{action.capitalize()} a message")
        action_parser.add_argument("message_id", help="Gmail message ID")

    return parser


async def _cmd_profile(connector: GmailConnector, args: argparse.Namespace) -> int:
    profile = await connector.get_user_profile()
    print(f"Email address: {profile.email_address}")
    print(f"Messages: {profile.messages_total}")
    print(f"Threads: {profile.threads_total}")
    print(f"History ID: {profile.history_id}")
    return 0


async def _cmd_messages_list(connector: GmailConnector, args: argparse.Namespace) -> int:
    search = SearchFilter(
        include_spam_trash=args.include_spam_trash,
        label_ids=tuple(args.labels),
        max_results=args.max_results,
        page_token=args.page_token,
        query=args.query,
    )
    page = await connector.list_messages(
        search, read_filter=MessageThreadFilter(format=MessageFormat.METADATA)
    )
    for m in page.messages:
        unread = "UNREAD" if "UNREAD" in m.label_ids else "READ"
        print(f"{m.id}\t{unread}\t{m.sender or '(unknown sender)'}\t{m.subject}")
    if page.next_page_token:
        print(f"Next page token: {page.next_page_token}")
    return 0


async def _cmd_messages_read(connector: GmailConnector, args: argparse.Namespace) -> int:
    read_filter = MessageThreadFilter(format=MessageFormat(args.format)) if args.format else None
    m = await connector.read_message(args.message_id, read_filter)
    print(f"From: {m.sender or ''}")
    print(f"To: {m.to}")
    print(f"Subject: {m.subject}")
    print(f"Labels: {', '.join(m.label_ids)}")
    for part in m.attachment_parts:
        print(f"Attachment: {part.file_name} ({part.mime_type}, {part.size} bytes)")
    print()
    if m.plain_text_body_part is not None:
        print(m.plain_text_body_part.body)
    elif m.html_body_part is not None:
        print(m.html_body_part.body)
    else:
        print(m.snippet)
    return 0


async def _cmd_messages_send(connector: GmailConnector, args: argparse.Namespace) -> int:
    message = Message(
        to=args.to,
        subject=args.subject,
        sender=args.sender,
        cc=args.cc,
        bcc=args.bcc,
        plain_text_body_part=MessageBodyPart.text(args.text),
        html_body_part=MessageBodyPart.html(args.html),
        inline_image_parts=[MessageBodyPart.from_path(p, inline=True) for p in args.inline],
        attachment_parts=[MessageBodyPart.from_path(p) for p in args.attach],
    )
    result = await connector.send_message(message, thread_id=args.thread_id)
    print(f"Sent message {result.message_id} in thread {result.thread_id}")
    return 0


async def _cmd_messages_action(connector: GmailConnector, args: argparse.Namespace) -> int:
    operations = {
        "trash": (connector.trash_message, "Trashed"),
        "untrash": (connector.untrash_message, "Restored"),
        "delete": (connector.delete_message, "Deleted"),
    }
    operation, verb = operations[args.messages_command]
    await operation(args.message_id)
    print(f"{verb} message {args.message_id}")
    return 0


async def _run(parsed: argparse.Namespace) -> int:
    connector = GmailConnector(get_settings())
    await connector.authenticate()

    if parsed.command == "profile":
        return await _cmd_profile(connector, parsed)

    if parsed.command == "messages":
        if parsed.messages_command == "list":
            return await _cmd_messages_list(connector, parsed)
        if parsed.messages_command == "read":
            return await _cmd_messages_read(connector, parsed)
        if parsed.messages_command == "send":
            return await _cmd_messages_send(connector, parsed)
        return await _cmd_messages_action(connector, parsed)

    logger.error("unknown_command", command=parsed.command)
    return 2


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Gmail Connector CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.info("gmail_connector_started", version="0.1.0", debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        return asyncio.run(_run(parsed))
    except (GMailError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
