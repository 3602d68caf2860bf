"""Per-invocation data models: credentials, search filter, message view."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field, SecretStr


class MailFolder(str, Enum):
    """Folders the receiver may search; the value is the server-side name."""

    INBOX = "INBOX"
    SENT = "SENT"


class Credentials(BaseModel):
    """Mailbox login, scoped to a single connection."""

    model_config = {"frozen": True}

    username: str = Field(description="Mailbox username (the email address)")
    password: SecretStr = Field(description="Mailbox password or app password")


class SearchFilter(BaseModel):
    """Criteria narrowing the search and locating the OTP in the body."""

    model_config = {"frozen": True}

    folder: MailFolder = Field(default=MailFolder.INBOX, description="Folder to search")
    from_address: str | None = Field(default=None, description="Sender must contain this")
    subject: str | None = Field(default=None, description="Subject must contain this")
    pattern: str | None = Field(default=None, description="Marker string preceding the OTP")
    start_time: int | None = Field(
        default=None,
        description="Lower bound on the received time, epoch milliseconds",
    )

    @property
    def start(self) -> datetime | None:
        """``start_time`` as an aware UTC datetime."""
        if self.start_time is None:
            return None
        return datetime.fromtimestamp(self.start_time / 1000, tz=UTC)


class MailMessage(Protocol):
    """Read-only view of a message owned by an open folder."""

    @property
    def content_type(self) -> str: ...

    @property
    def content(self) -> str: ...

    @property
    def received_date(self) -> datetime: ...
