"""Shared test fixtures for the OTP receiver test suite."""

from __future__ import annotations

import imaplib
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from unittest.mock import MagicMock

import pytest

from otp_receiver.config import MailEndpoint, OtpReceiverConfig, RetryConfig
from otp_receiver.logging import setup_logging
from otp_receiver.models import Credentials


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    # structlog caches loggers on first use; route them through stdlib from the start.
    setup_logging(json=False, level="DEBUG")


@pytest.fixture
def endpoint() -> MailEndpoint:
    return MailEndpoint(protocol="imap", host="imap.test.com", port=993)


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(max_attempts=2, initial_wait_seconds=0.01, max_wait_seconds=0.01)


@pytest.fixture
def receiver_config(endpoint: MailEndpoint, retry_config: RetryConfig) -> OtpReceiverConfig:
    return OtpReceiverConfig(
        timeout_seconds=5.0,
        log_json=False,
        log_level="DEBUG",
        endpoint=endpoint,
        retry=retry_config,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="a@x.com", password="p")


# ------------------------------------------------------------------
# Sample messages
# ------------------------------------------------------------------


@dataclass
class FakeMessage:
    """In-memory stand-in for a fetched message."""

    content: str
    content_type: str = "TEXT/PLAIN; charset=utf-8"
    received_date: datetime = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _build_plain_email(
    *,
    body: str = "Your code is 123456. It expires in 10 minutes.",
    subject: str = "Your login code",
    from_addr: str = "noreply@bank.com",
) -> bytes:
    """Build a simple plain-text email as raw bytes."""
    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = "a@x.com"
    msg["Message-ID"] = "<otp-001@bank.com>"
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"
    return msg.as_bytes()


def _build_html_email(*, body_html: str = "<p>Your code is 654321</p>") -> bytes:
    msg = MIMEText(body_html, "html")
    msg["Subject"] = "Your login code"
    msg["From"] = "noreply@bank.com"
    msg["To"] = "a@x.com"
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"
    return msg.as_bytes()


def _build_multipart_email(*, body_text: str = "Your code is 111222") -> bytes:
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Your login code"
    msg["From"] = "noreply@bank.com"
    msg["To"] = "a@x.com"
    msg.attach(MIMEText(body_text, "plain"))
    return msg.as_bytes()


# ------------------------------------------------------------------
# Mock IMAP connection
# ------------------------------------------------------------------


def _make_mock_imap(
    *,
    messages: dict[bytes, tuple[bytes, float]] | None = None,
    search_uids: list[bytes] | None = None,
    select_status: str = "OK",
) -> MagicMock:
    """Create a mock imaplib.IMAP4_SSL with programmed responses.

    *messages* maps a UID to ``(raw_bytes, received_epoch_seconds)``.  The
    SEARCH response lists *search_uids*, or every UID of *messages* in
    insertion order.
    """
    messages = messages or {}
    if search_uids is None:
        search_uids = list(messages)

    mock = MagicMock()
    mock.login.return_value = ("OK", [b"Logged in"])
    mock.select.return_value = (select_status, [b"3"])
    mock.close.return_value = ("OK", [b"Closed"])
    mock.logout.return_value = ("BYE", [b"Bye"])

    def uid_handler(command: str, *args):
        if command == "SEARCH":
            return ("OK", [b" ".join(search_uids)])
        if command == "FETCH":
            uid = args[0].encode()
            if uid not in messages:
                return ("OK", [None])
            raw, received = messages[uid]
            internaldate = imaplib.Time2Internaldate(received).encode()
            header = b"1 (UID %s INTERNALDATE %s BODY[] {%d}" % (uid, internaldate, len(raw))
            return ("OK", [(header, raw), b")"])
        return ("BAD", [b"unknown command"])

    mock.uid.side_effect = uid_handler
    return mock
