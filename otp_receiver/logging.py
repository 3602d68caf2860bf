"""structlog wiring for the receiver.

Log lines go through stdlib ``logging`` to stdout, where Lambda picks them
up.  Credential-like keys are masked before rendering, whatever the call
site passes.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from .config import OtpReceiverConfig

REDACTED = "**********"
SENSITIVE_KEYS = frozenset({"password", "passwd", "secret", "token", "otp"})


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask the value of every key named like a credential."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    config: OtpReceiverConfig | None = None,
    *,
    json: bool | None = None,
    level: str | None = None,
) -> None:
    """Route structlog through a single stdout handler on the root logger.

    *config* supplies ``log_json`` and ``log_level``; the keyword arguments
    override it.  Without either, JSON lines at ``INFO``.
    """
    if json is None:
        json = config.log_json if config is not None else True
    if level is None:
        level = config.log_level if config is not None else "INFO"

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
