"""Search an open folder and pull the OTP out of the newest match."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import structlog

from .errors import (
    MessageTooOld,
    NoMatchingMessage,
    OtpReceiverError,
    PatternNotFound,
    ShortRemainder,
    UnsupportedContentType,
)
from .imap_client import ImapFolder
from .models import MailMessage, SearchFilter
from .search import build_query

logger = structlog.get_logger()

OTP_LENGTH = 6
ACCEPTED_CONTENT_TYPES = ("TEXT/PLAIN", "TEXT/HTML")

M = TypeVar("M")


def select_message(messages: Sequence[M]) -> M:
    """Return the last message in folder order."""
    if not messages:
        raise NoMatchingMessage("search returned no messages")
    return messages[-1]


def parse_otp(message: MailMessage, search_filter: SearchFilter) -> str:
    """Return the OTP following the filter's pattern in *message*.

    Raises
    ------
    MessageTooOld
        The message was received before ``search_filter.start_time``.
    UnsupportedContentType
        The content type contains neither ``TEXT/PLAIN`` nor ``TEXT/HTML``.
    PatternNotFound
        No pattern was given, or it does not occur in the body.
    ShortRemainder
        Fewer than ``OTP_LENGTH`` characters follow the pattern.
    """
    start = search_filter.start
    if start is not None and message.received_date < start:
        raise MessageTooOld(f"received {message.received_date.isoformat()} before {start.isoformat()}")

    # Literal, case-sensitive match on whatever the store reports.
    content_type = message.content_type
    if not any(accepted in content_type for accepted in ACCEPTED_CONTENT_TYPES):
        raise UnsupportedContentType(content_type)

    content = message.content
    pattern = search_filter.pattern
    if not pattern:
        raise PatternNotFound("no pattern given")
    index = content.find(pattern)
    if index < 0:
        raise PatternNotFound(pattern)

    start_index = index + len(pattern)
    if len(content) - start_index < OTP_LENGTH:
        raise ShortRemainder(f"{len(content) - start_index} characters after {pattern!r}")
    return content[start_index : start_index + OTP_LENGTH]


def extract_otp(message: MailMessage, search_filter: SearchFilter) -> str:
    """Like :func:`parse_otp`, but every extraction failure yields ``""``."""
    try:
        return parse_otp(message, search_filter)
    except OtpReceiverError as exc:
        logger.info("otp_not_extracted", reason=type(exc).__name__, detail=str(exc))
        return ""


def fetch_otp(folder: ImapFolder, search_filter: SearchFilter) -> str:
    """Search *folder* with the filter and extract the OTP from the last match."""
    messages = folder.search(build_query(search_filter))
    try:
        message = select_message(messages)
    except NoMatchingMessage:
        logger.info("otp_no_matching_message", folder=folder.name)
        return ""
    return extract_otp(message, search_filter)
