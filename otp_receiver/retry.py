"""Connection retry policy built on tenacity."""

from __future__ import annotations

import ssl
from collections.abc import Callable

from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from .config import RetryConfig


def is_transient(exc: BaseException) -> bool:
    """Socket-level failures that may succeed on another attempt.

    A rejected server certificate fails the same way every time.
    """
    return isinstance(exc, OSError) and not isinstance(exc, ssl.SSLCertVerificationError)


def with_retry(config: RetryConfig) -> Callable:
    """Decorator retrying transient socket errors per *config*; the last error is reraised."""
    return retry(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.multiplier,
            min=config.initial_wait_seconds,
            max=config.max_wait_seconds,
        ),
        reraise=True,
    )
