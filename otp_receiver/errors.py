"""Error taxonomy for OTP retrieval.

Every failure resolves to the same observable outcome (an empty OTP), but
the kinds are kept distinct so they can be logged and tested.
"""

from __future__ import annotations


class OtpReceiverError(Exception):
    """Base class for all OTP retrieval failures."""


class NoInput(OtpReceiverError):
    """The invocation carried no event at all."""


class MissingCredentials(OtpReceiverError):
    """Email address or password absent or blank."""


class MailConnectionError(OtpReceiverError):
    """Connecting or authenticating to the mail store failed."""


class FolderError(OtpReceiverError):
    """The named folder could not be opened read-only."""


class NoMatchingMessage(OtpReceiverError):
    """The search produced no messages."""


class UnsupportedContentType(OtpReceiverError):
    """The message is neither plain text nor HTML."""


class PatternNotFound(OtpReceiverError):
    """The OTP marker is missing from the filter or the message body."""


class ShortRemainder(OtpReceiverError):
    """Fewer characters follow the marker than an OTP needs."""


class MessageTooOld(OtpReceiverError):
    """The selected message was received before the requested start time."""
