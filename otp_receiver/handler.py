"""Request/response entry points: event parsing and the Lambda handler."""

from __future__ import annotations

import imaplib
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

import structlog

from .config import OtpReceiverConfig
from .connector import open_folder
from .errors import MissingCredentials, NoInput, OtpReceiverError
from .extractor import fetch_otp
from .logging import setup_logging
from .models import Credentials, MailFolder, SearchFilter

logger = structlog.get_logger()

_INTEGER = re.compile(r"[+-]?\d+")


def _parse_start_time(value: Any) -> int | None:
    """Epoch milliseconds, or None for absent, non-numeric and unrepresentable values."""
    if isinstance(value, str) and _INTEGER.fullmatch(value):
        millis = int(value)
    elif isinstance(value, int) and not isinstance(value, bool):
        millis = value
    else:
        return None
    try:
        datetime.fromtimestamp(millis / 1000, tz=UTC)
    except (ValueError, OverflowError, OSError):
        return None
    return millis


def _optional(event: Mapping[str, Any], key: str) -> str | None:
    value = event.get(key)
    return value if isinstance(value, str) else None


def parse_event(event: Mapping[str, Any] | None) -> tuple[Credentials, SearchFilter]:
    """Split an invocation event into credentials and a search filter.

    Raises
    ------
    NoInput
        *event* is None.
    MissingCredentials
        ``email_address`` or ``password`` is absent or blank.
    """
    if event is None:
        raise NoInput("no event received")

    email_address = _optional(event, "email_address")
    password = _optional(event, "password")
    if not email_address or not email_address.strip() or not password or not password.strip():
        raise MissingCredentials("email_address and password are required")

    credentials = Credentials(username=email_address, password=password)
    search_filter = SearchFilter(
        folder=MailFolder.INBOX,
        from_address=_optional(event, "from_address"),
        subject=_optional(event, "subject"),
        pattern=_optional(event, "pattern"),
        start_time=_parse_start_time(event.get("start_time")),
    )
    return credentials, search_filter


class OtpReceiver:
    """Fetches OTPs from the configured mail endpoint, one call at a time."""

    def __init__(self, config: OtpReceiverConfig) -> None:
        self.config = config

    def fetch_otp(self, credentials: Credentials, search_filter: SearchFilter) -> str:
        """Connect, search, extract and disconnect; mail store errors propagate."""
        with open_folder(
            self.config.endpoint,
            credentials,
            search_filter.folder.value,
            timeout=self.config.timeout_seconds,
            retry=self.config.retry,
        ) as folder:
            return fetch_otp(folder, search_filter)

    def handle_request(self, event: Mapping[str, Any] | None, context: Any = None) -> str:
        """Return the OTP for *event*, or ``""`` on any failure."""
        request_id = getattr(context, "aws_request_id", None)
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                credentials, search_filter = parse_event(event)
            except NoInput:
                logger.warning("otp_event_missing")
                return ""
            except MissingCredentials:
                logger.warning("otp_credentials_missing")
                return ""

            try:
                otp = self.fetch_otp(credentials, search_filter)
            except (OtpReceiverError, imaplib.IMAP4.error, OSError, UnicodeError) as exc:
                logger.error(
                    "otp_fetch_failed",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    host=self.config.endpoint.host,
                )
                return ""

            logger.info("otp_fetch_complete", found=bool(otp))
            return otp


@lru_cache(maxsize=1)
def default_receiver() -> OtpReceiver:
    """Build the process-wide receiver from the environment."""
    config = OtpReceiverConfig()
    setup_logging(config)
    return OtpReceiver(config)


def lambda_handler(event: Mapping[str, Any] | None, context: Any = None) -> str:
    return default_receiver().handle_request(event, context)
