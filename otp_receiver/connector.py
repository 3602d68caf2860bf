"""Scoped acquisition of a read-only mail folder."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from .config import MailEndpoint, RetryConfig
from .imap_client import ImapFolder, MailStore, session_properties
from .models import Credentials

logger = structlog.get_logger()


@contextmanager
def open_folder(
    endpoint: MailEndpoint,
    credentials: Credentials,
    folder_name: str,
    *,
    timeout: float | None = None,
    retry: RetryConfig | None = None,
) -> Iterator[ImapFolder]:
    """Connect, authenticate and open *folder_name* read-only.

    The folder and then the store are closed on every exit path, including
    a failed login or folder selection.

    Raises
    ------
    MailConnectionError
        The store could not be reached or rejected the credentials.
    FolderError
        The folder could not be opened read-only.
    """
    store = MailStore(session_properties(endpoint), timeout=timeout, retry=retry)
    folder: ImapFolder | None = None
    try:
        store.connect(credentials)
        folder = store.get_folder(folder_name)
        folder.open_read_only()
        logger.debug("imap_folder_opened", folder=folder_name)
        yield folder
    finally:
        if folder is not None:
            folder.close()
        store.close()
