"""OTP receiver: fetch a one-time password from an IMAP inbox.

Public API re-exported here for convenience::

    from otp_receiver import OtpReceiver, OtpReceiverConfig
"""

from .config import MailEndpoint, OtpReceiverConfig, RetryConfig
from .connector import open_folder
from .errors import (
    FolderError,
    MailConnectionError,
    MessageTooOld,
    MissingCredentials,
    NoInput,
    NoMatchingMessage,
    OtpReceiverError,
    PatternNotFound,
    ShortRemainder,
    UnsupportedContentType,
)
from .extractor import extract_otp, fetch_otp, parse_otp, select_message
from .handler import OtpReceiver, lambda_handler, parse_event
from .imap_client import ImapFolder, ImapMessage, MailStore, SessionProperties, session_properties
from .logging import setup_logging
from .models import Credentials, MailFolder, MailMessage, SearchFilter
from .search import AndTerm, FromStringTerm, ReceivedDateTerm, SearchTerm, SubjectTerm, build_query

__all__ = [
    "AndTerm",
    "Credentials",
    "FolderError",
    "FromStringTerm",
    "ImapFolder",
    "ImapMessage",
    "MailConnectionError",
    "MailEndpoint",
    "MailFolder",
    "MailMessage",
    "MailStore",
    "MessageTooOld",
    "MissingCredentials",
    "NoInput",
    "NoMatchingMessage",
    "OtpReceiver",
    "OtpReceiverConfig",
    "OtpReceiverError",
    "PatternNotFound",
    "ReceivedDateTerm",
    "RetryConfig",
    "SearchFilter",
    "SearchTerm",
    "SessionProperties",
    "ShortRemainder",
    "SubjectTerm",
    "UnsupportedContentType",
    "build_query",
    "extract_otp",
    "fetch_otp",
    "lambda_handler",
    "open_folder",
    "parse_event",
    "parse_otp",
    "select_message",
    "session_properties",
    "setup_logging",
]
