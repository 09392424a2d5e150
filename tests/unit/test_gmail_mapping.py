"""Unit tests for Gmail response mapping helpers."""

from gmail_connector.gmail.mapping import (
    attachment_from_json,
    error_message,
    item_ids,
    message_from_json,
    message_list_page,
    profile_from_json,
    send_result_from_json,
    thread_from_json,
)

from tests.conftest import b64url


def test_message_from_json_parses_basic_fields(sample_message_data) -> None:
    message = message_from_json(sample_message_data)

    assert message.id == "msg123456"
    assert message.thread_id == "thread789"
    assert message.label_ids == ["INBOX", "UNREAD"]
    assert message.history_id == "4242"
    assert message.internal_date == 1700000000000
    assert message.size_estimate == 20480
    assert message.subject == "Weekly report"
    assert message.sender == "Reports <reports@example.com>"
    assert message.to == "user@example.com"
    assert message.cc == "boss@example.com"
    assert message.bcc is None
    assert message.mime_type == "multipart/mixed"
    assert message.headers["Received"] == "first"
    assert message.raw is None


def test_message_from_json_flattens_parts(sample_message_data) -> None:
    message = message_from_json(sample_message_data)

    assert message.plain_text_body_part is not None
    assert message.plain_text_body_part.body == "Report inside"
    assert message.plain_text_body_part.part_id == "0.0.0"
    assert message.html_body_part is not None
    assert message.html_body_part.body == "<p>Report inside</p>"

    (image,) = message.inline_image_parts
    assert image.file_name == "logo.png"
    assert image.mime_type == "image/png"
    assert image.headers["Content-ID"] == "<logo.png>"

    (attachment,) = message.attachment_parts
    assert attachment.file_name == "report.pdf"
    assert attachment.attachment_id == "att-1"
    assert attachment.size == 20000
    assert attachment.body == ""


def test_message_from_json_single_part_and_defaults() -> None:
    data = {
        "id": "m1",
        "payload": {
            "mimeType": "text/plain",
            "headers": [{"name": "subject", "value": "lower-case header"}],
            "body": {"data": b64url("just text")},
        },
    }

    message = message_from_json(data)

    assert message.subject == "lower-case header"
    assert message.plain_text_body_part is not None
    assert message.plain_text_body_part.body == "just text"
    assert message.thread_id == ""
    assert message.label_ids == []
    assert message.internal_date is None
    assert message.size_estimate == 0
    assert message.snippet == ""


def test_message_from_json_raw_format() -> None:
    message = message_from_json({"id": "m1", "threadId": "t1", "raw": "VG86IGFAeC5jb20="})

    assert message.raw == "VG86IGFAeC5jb20="
    assert message.plain_text_body_part is None
    assert message.attachment_parts == []


def test_thread_from_json_keeps_message_order(sample_message_data) -> None:
    second = {**sample_message_data, "id": "msg2"}
    thread = thread_from_json(
        {"id": "thread789", "historyId": 99, "messages": [sample_message_data, second]}
    )

    assert thread.id == "thread789"
    assert thread.history_id == "99"
    assert [m.id for m in thread.messages] == ["msg123456", "msg2"]


def test_list_page_helpers() -> None:
    data = {
        "messages": [{"id": "b", "threadId": "t"}, {"id": "a", "threadId": "t"}],
        "resultSizeEstimate": 2,
        "nextPageToken": "next",
    }

    assert item_ids(data, "messages") == ["b", "a"]
    assert item_ids({}, "threads") == []

    page = message_list_page(data, [])
    assert page.result_size_estimate == 2
    assert page.next_page_token == "next"

    empty = message_list_page({"resultSizeEstimate": 0}, [])
    assert empty.next_page_token is None


def test_small_resources() -> None:
    profile = profile_from_json(
        {"emailAddress": "user@example.com", "messagesTotal": 10, "threadsTotal": 4, "historyId": "7"}
    )
    assert profile.email_address == "user@example.com"
    assert profile.messages_total == 10
    assert profile.threads_total == 4

    attachment = attachment_from_json({"size": 3, "data": b64url(b"abc")}, "att-9")
    assert attachment.attachment_id == "att-9"
    assert attachment.decoded() == b"abc"

    sent = send_result_from_json({"id": "s1", "threadId": "t1", "labelIds": ["SENT"]})
    assert sent.message_id == "s1"
    assert sent.thread_id == "t1"
    assert sent.label_ids == ["SENT"]


def test_error_message() -> None:
    assert error_message({"error": {"message": "Not Found"}}) == "Not Found"
    assert error_message({"error": "bad"}) is None
    assert error_message(None) is None


def test_non_object_entries_are_skipped() -> None:
    data = {
        "id": "m1",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": ["Subject: nope", None, {"name": "Subject", "value": "kept"}],
            "parts": [
                "junk",
                {"mimeType": "text/plain", "body": {"data": b64url("plain")}},
                {"mimeType": "text/html", "body": "not an object"},
            ],
        },
    }

    message = message_from_json(data)

    assert message.subject == "kept"
    assert message.plain_text_body_part is not None
    assert message.plain_text_body_part.body == "plain"
    assert message.html_body_part is not None
    assert message.html_body_part.body == ""

    assert item_ids({"messages": [None, "m0", {"id": "m1"}, ["m2"], {"id": "m3"}]}, "messages") == [
        "m1",
        "m3",
    ]
    assert item_ids({"threads": "t1"}, "threads") == []
    assert thread_from_json({"id": "t", "messages": [None, {"id": "m1"}]}).messages[0].id == "m1"
    assert message_from_json({"id": "m1", "payload": []}).subject == ""
