"""Blocking IMAP store, folder and message wrappers over stdlib imaplib."""

from __future__ import annotations

import email
import email.message
import email.policy
import imaplib
import re
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from .config import MailEndpoint, RetryConfig
from .errors import FolderError, MailConnectionError
from .models import Credentials
from .retry import with_retry
from .search import SearchTerm, quote

logger = structlog.get_logger()

FETCH_ITEMS = "(INTERNALDATE BODY.PEEK[])"
INTERNALDATE = re.compile(rb'INTERNALDATE "([^"]+)"')


@dataclass(frozen=True)
class SessionProperties:
    """Connection properties derived from a MailEndpoint."""

    protocol: str
    host: str
    port: int
    ssl: bool = True
    ssl_fallback: bool = False
    ssl_port: int | None = None


def session_properties(endpoint: MailEndpoint) -> SessionProperties:
    """Force TLS on the endpoint's port with no plaintext fallback."""
    return SessionProperties(
        protocol=endpoint.protocol,
        host=endpoint.host,
        port=endpoint.port,
        ssl=True,
        ssl_fallback=False,
        ssl_port=endpoint.port,
    )


class MailStore:
    """An authenticated IMAP session."""

    def __init__(
        self,
        properties: SessionProperties,
        *,
        timeout: float | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._properties = properties
        self._timeout = timeout
        self._retry = retry or RetryConfig(max_attempts=1)
        self._conn: imaplib.IMAP4 | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self, credentials: Credentials) -> None:
        """Open the socket and log in.

        Socket failures are retried per the RetryConfig; authentication
        failures are not.
        """
        try:
            conn = with_retry(self._retry)(self._open_socket)()
        except OSError as exc:
            raise MailConnectionError(
                f"cannot reach {self._properties.host}:{self._properties.port}: {exc}"
            ) from exc
        self._conn = conn

        try:
            conn.login(credentials.username, credentials.password.get_secret_value())
        except (imaplib.IMAP4.error, OSError) as exc:
            raise MailConnectionError(f"login failed for {credentials.username}: {exc}") from exc

        logger.info("imap_connected", host=self._properties.host, username=credentials.username)

    def _open_socket(self) -> imaplib.IMAP4:
        props = self._properties
        if props.ssl:
            return imaplib.IMAP4_SSL(
                props.host,
                props.ssl_port or props.port,
                ssl_context=ssl.create_default_context(),
                timeout=self._timeout,
            )
        return imaplib.IMAP4(props.host, props.port, timeout=self._timeout)

    def get_folder(self, name: str) -> ImapFolder:
        if self._conn is None:
            raise MailConnectionError("store is not connected")
        return ImapFolder(self._conn, name)

    def close(self) -> None:
        """Log out; errors while closing are logged and dropped."""
        if self._conn is None:
            return
        try:
            self._conn.logout()
        except (imaplib.IMAP4.error, OSError) as exc:
            logger.debug("imap_logout_failed", error=str(exc))
        self._conn = None
        logger.info("imap_disconnected")


class ImapFolder:
    """A mailbox folder selected read-only on an open connection."""

    def __init__(self, conn: imaplib.IMAP4, name: str) -> None:
        self._conn = conn
        self._name = name
        self._open = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_open(self) -> bool:
        return self._open

    def open_read_only(self) -> None:
        try:
            status, data = self._conn.select(quote(self._name), readonly=True)
        except imaplib.IMAP4.error as exc:
            raise FolderError(f"cannot open folder {self._name}: {exc}") from exc
        if status != "OK":
            raise FolderError(f"cannot open folder {self._name}: {data!r}")
        self._open = True

    def search(self, term: SearchTerm) -> list[ImapMessage]:
        """Run *term* against the folder; results are in folder order."""
        criteria = term.criteria()
        status, data = self._conn.uid("SEARCH", None, *criteria)
        if status != "OK":
            raise imaplib.IMAP4.error(f"SEARCH failed: {data!r}")
        if not data or not data[0]:
            return []
        uids = [uid.decode() for uid in data[0].split()]
        logger.debug("imap_search_complete", folder=self._name, criteria=criteria, matches=len(uids))
        return [ImapMessage(self, uid) for uid in uids]

    def fetch(self, uid: str) -> tuple[datetime, bytes]:
        """Fetch the received date and raw bytes of *uid* without setting \\Seen."""
        status, data = self._conn.uid("FETCH", uid, FETCH_ITEMS)
        if status != "OK":
            raise imaplib.IMAP4.error(f"FETCH {uid} failed: {data!r}")
        raw_bytes: bytes | None = None
        metadata: list[bytes] = []
        for item in data or []:
            if isinstance(item, tuple):
                metadata.append(item[0])
                if raw_bytes is None:
                    raw_bytes = item[1]
            elif isinstance(item, bytes):
                metadata.append(item)
        if raw_bytes is None:
            raise imaplib.IMAP4.error(f"FETCH {uid} returned no message")
        # Servers may send INTERNALDATE before or after the BODY[] literal.
        return _parse_internaldate(b" ".join(metadata)), raw_bytes

    def close(self) -> None:
        """Close without expunging; a read-only CLOSE never removes messages."""
        if not self._open:
            return
        try:
            self._conn.close()
        except (imaplib.IMAP4.error, OSError) as exc:
            logger.debug("imap_close_failed", folder=self._name, error=str(exc))
        self._open = False


class ImapMessage:
    """A search hit, loaded from its folder on first attribute access."""

    def __init__(self, folder: ImapFolder, uid: str) -> None:
        self._folder = folder
        self._uid = uid
        self._received_date: datetime | None = None
        self._message: email.message.EmailMessage | None = None

    @property
    def uid(self) -> str:
        return self._uid

    def _load(self) -> email.message.EmailMessage:
        if self._message is None:
            self._received_date, raw_bytes = self._folder.fetch(self._uid)
            self._message = email.message_from_bytes(raw_bytes, policy=email.policy.default)
        return self._message

    @property
    def received_date(self) -> datetime:
        self._load()
        assert self._received_date is not None
        return self._received_date

    @property
    def content_type(self) -> str:
        """MIME type in upper case followed by the header's parameters."""
        msg = self._load()
        content_type = msg.get_content_type().upper()
        header = msg["Content-Type"]
        if header is not None:
            for key, value in header.params.items():
                content_type += f"; {key}={value}"
        return content_type

    @property
    def content(self) -> str:
        """First text rendering of the body; multipart bodies are stringified whole."""
        msg = self._load()
        if msg.is_multipart():
            return msg.as_string()
        try:
            payload = msg.get_content()
        except LookupError:
            payload = msg.get_payload(decode=True) or b""
        if isinstance(payload, bytes):
            return payload.decode("utf-8", errors="replace")
        return str(payload)


def _parse_internaldate(response: bytes) -> datetime:
    match = INTERNALDATE.search(response)
    if match is None:
        raise imaplib.IMAP4.error(f"no INTERNALDATE in {response!r}")
    try:
        received = datetime.strptime(match.group(1).decode(), "%d-%b-%Y %H:%M:%S %z")
    except ValueError as exc:
        raise imaplib.IMAP4.error(f"bad INTERNALDATE {match.group(1)!r}") from exc
    return received.astimezone(UTC)
