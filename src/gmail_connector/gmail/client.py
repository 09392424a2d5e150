"""Gmail API connector.

This module provides the public client for the Gmail REST API: listing,
reading, sending, trashing and deleting messages and threads, downloading
attachments, and reading the mailbox profile.

Notes:
    The transport is synchronous. Every call is wrapped in `asyncio.to_thread`
    so the connector can be used from async code without blocking the loop.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from gmail_connector.config import Settings, get_settings
from gmail_connector.exceptions import ApiError, AuthenticationError, PayloadError
from gmail_connector.gmail import mapping, query
from gmail_connector.gmail.transport import AuthorizedSessionTransport, Transport, TransportResponse
from gmail_connector.mime import MimeAssembler
from gmail_connector.models import (
    Message,
    MessageAttachment,
    MessageListPage,
    MessageThreadFilter,
    SearchFilter,
    SendResult,
    Thread,
    ThreadListPage,
    UserProfile,
)

logger = structlog.get_logger()

HTTP_OK = 200
HTTP_NO_CONTENT = 204


class GmailConnector:
    """Gmail API client.

    Every operation either returns its result or raises a
    :class:`~gmail_connector.exceptions.GMailError` subclass carrying the
    message, the HTTP status (when there was one) and the underlying cause.
    Nothing is retried.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: Transport | None = None,
        assembler: MimeAssembler | None = None,
    ) -> None:
        """Initialize the connector.

        Args:
            settings: Application settings. If None, uses default settings.
            transport: Authenticated transport. If None, call
                ``await authenticate()`` before the first operation.
            assembler: MIME assembler used by ``send_message``.
        """
        self.settings = settings or get_settings()
        self.assembler = assembler or MimeAssembler()
        self._transport: Transport | None = transport
        logger.info("gmail_connector_initialized", user_id=self.settings.user_id)

    async def authenticate(self) -> None:
        """Load OAuth2 credentials and open the default transport.

        Raises:
            ConfigurationError: If the client secrets file is missing.
            AuthenticationError: If authentication fails.
        """
        if self._transport is not None:
            return
        self._transport = await asyncio.to_thread(
            AuthorizedSessionTransport.from_settings, self.settings
        )

    # Messages

    async def list_messages(
        self,
        search: SearchFilter | None = None,
        *,
        user_id: str | None = None,
        read_filter: MessageThreadFilter | None = None,
    ) -> MessageListPage:
        """List one page of messages, each read in full.

        Messages are read one after another, in the order Gmail listed them.
        If any read fails the whole call fails.

        Raises:
            QueryEncodingError: If the search query cannot be encoded.
            GMailError: If the listing or any read fails.
        """
        uid = self._user(user_id)
        search = search or SearchFilter()
        path = query.with_query(
            query.messages_path(uid), query.search_query(search, self.settings.query_charset)
        )
        logger.info(
            "listing_messages",
            label_ids=list(search.label_ids),
            max_results=search.max_results,
            query=search.query,
        )

        data = await self._request("GET", path)
        messages = [
            await self.read_message(message_id, read_filter, user_id=uid)
            for message_id in mapping.item_ids(data, "messages")
        ]
        return mapping.message_list_page(data, messages)

    async def send_message(
        self,
        message: Message,
        *,
        user_id: str | None = None,
        thread_id: str | None = None,
    ) -> SendResult:
        """Assemble, encode and send ``message``.

        Args:
            message: Recipients, subject and body parts to send.
            user_id: Mailbox to send from.
            thread_id: Existing thread to add the message to.

        Raises:
            EncodingError: If the MIME document cannot be encoded; nothing is sent.
            GMailError: If Gmail rejects the message.
        """
        uid = self._user(user_id)
        raw = self.assembler.encode(message)
        envelope: dict[str, Any] = {"raw": raw}
        if thread_id:
            envelope["threadId"] = thread_id

        logger.info("sending_message", user_id=uid, thread_id=thread_id)
        data = await self._request("POST", query.send_path(uid), json=envelope)
        result = mapping.send_result_from_json(data)
        logger.info("message_sent", message_id=result.message_id, thread_id=result.thread_id)
        return result

    async def read_message(
        self,
        message_id: str,
        read_filter: MessageThreadFilter | None = None,
        *,
        user_id: str | None = None,
    ) -> Message:
        """Get a specific message by ID."""
        uid = self._user(user_id)
        path = query.with_query(query.message_path(uid, message_id), query.read_query(read_filter))
        logger.debug("reading_message", message_id=message_id)
        data = await self._request("GET", path)
        return mapping.message_from_json(data)

    async def get_attachment(
        self,
        message_id: str,
        attachment_id: str,
        *,
        user_id: str | None = None,
    ) -> MessageAttachment:
        """Download an attachment body that was not inlined in the message."""
        uid = self._user(user_id)
        logger.info("getting_attachment", message_id=message_id, attachment_id=attachment_id)
        data = await self._request("GET", query.attachment_path(uid, message_id, attachment_id))
        return mapping.attachment_from_json(data, attachment_id)

    async def trash_message(self, message_id: str, *, user_id: str | None = None) -> bool:
        """Move a message to the trash. Trashing a trashed message succeeds."""
        return await self._action("POST", query.message_path(self._user(user_id), message_id, "trash"))

    async def untrash_message(self, message_id: str, *, user_id: str | None = None) -> bool:
        return await self._action(
            "POST", query.message_path(self._user(user_id), message_id, "untrash")
        )

    async def delete_message(self, message_id: str, *, user_id: str | None = None) -> bool:
        """Permanently delete a message, bypassing the trash."""
        return await self._action(
            "DELETE", query.message_path(self._user(user_id), message_id), HTTP_NO_CONTENT
        )

    # Threads

    async def list_threads(
        self,
        search: SearchFilter | None = None,
        *,
        user_id: str | None = None,
        read_filter: MessageThreadFilter | None = None,
    ) -> ThreadListPage:
        """List one page of threads, each read in full, in listing order."""
        uid = self._user(user_id)
        search = search or SearchFilter()
        path = query.with_query(
            query.threads_path(uid), query.search_query(search, self.settings.query_charset)
        )
        logger.info(
            "listing_threads",
            label_ids=list(search.label_ids),
            max_results=search.max_results,
            query=search.query,
        )

        data = await self._request("GET", path)
        threads = [
            await self.read_thread(thread_id, read_filter, user_id=uid)
            for thread_id in mapping.item_ids(data, "threads")
        ]
        return mapping.thread_list_page(data, threads)

    async def read_thread(
        self,
        thread_id: str,
        read_filter: MessageThreadFilter | None = None,
        *,
        user_id: str | None = None,
    ) -> Thread:
        uid = self._user(user_id)
        path = query.with_query(query.thread_path(uid, thread_id), query.read_query(read_filter))
        logger.debug("reading_thread", thread_id=thread_id)
        data = await self._request("GET", path)
        return mapping.thread_from_json(data)

    async def trash_thread(self, thread_id: str, *, user_id: str | None = None) -> bool:
        return await self._action("POST", query.thread_path(self._user(user_id), thread_id, "trash"))

    async def untrash_thread(self, thread_id: str, *, user_id: str | None = None) -> bool:
        return await self._action(
            "POST", query.thread_path(self._user(user_id), thread_id, "untrash")
        )

    async def delete_thread(self, thread_id: str, *, user_id: str | None = None) -> bool:
        return await self._action(
            "DELETE", query.thread_path(self._user(user_id), thread_id), HTTP_NO_CONTENT
        )

    # Profile

    async def get_user_profile(self, user_id: str | None = None) -> UserProfile:
        data = await self._request("GET", query.profile_path(self._user(user_id)))
        return mapping.profile_from_json(data)

    # Internals

    def _user(self, user_id: str | None) -> str:
        return user_id or self.settings.user_id

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise AuthenticationError(
                "Gmail connector is not authenticated. Call await GmailConnector.authenticate() first."
            )
        return self._transport

    async def _action(self, method: str, path: str, expected_status: int = HTTP_OK) -> bool:
        await self._request(method, path, expected_status=expected_status)
        logger.info("gmail_action_completed", method=method, path=path)
        return True

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any | None = None,
        expected_status: int = HTTP_OK,
    ) -> Any:
        transport = self._require_transport()
        if method == "GET":
            response = await asyncio.to_thread(transport.get, path)
        elif method == "POST":
            response = await asyncio.to_thread(transport.post, path, json)
        elif method == "DELETE":
            response = await asyncio.to_thread(transport.delete, path)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")

        if response.status_code != expected_status:
            raise _api_error(method, path, response)
        if expected_status == HTTP_NO_CONTENT:
            return None

        try:
            body = response.json()
        except ValueError as exc:
            logger.error("gmail_payload_invalid", method=method, path=path, error=str(exc))
            raise PayloadError(
                f"Invalid JSON in response to {method} {path}",
                status_code=response.status_code,
                cause=exc,
            ) from exc

        if not isinstance(body, dict):
            exc = TypeError(f"expected a JSON object, got {type(body).__name__}")
            logger.error("gmail_payload_invalid", method=method, path=path, error=str(exc))
            raise PayloadError(
                f"Unexpected JSON in response to {method} {path}",
                status_code=response.status_code,
                cause=exc,
            ) from exc
        return body


def _api_error(method: str, path: str, response: TransportResponse) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    message = mapping.error_message(body) or response.reason or f"HTTP {response.status_code}"
    logger.warning(
        "gmail_api_error",
        method=method,
        path=path,
        status_code=response.status_code,
        error=message,
    )
    return ApiError(message, status_code=response.status_code)
