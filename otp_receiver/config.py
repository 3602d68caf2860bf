"""Receiver configuration loaded from environment variables.

The mail endpoint is fixed per deployment; credentials are never part of
the configuration and arrive with each invocation.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class MailEndpoint(BaseSettings):
    """Mail store endpoint settings."""

    model_config = {"env_prefix": "MAIL_", "frozen": True}

    protocol: Literal["imap"] = Field(default="imap", description="Mail store protocol")
    host: str = Field(default="imap.gmail.com", description="Mail server hostname")
    port: int = Field(default=993, description="Mail server TLS port")


class RetryConfig(BaseSettings):
    """Retry / backoff settings for establishing the mail connection."""

    model_config = {"env_prefix": "RETRY_"}

    max_attempts: int = Field(default=3, description="Maximum connection attempts per invocation")
    initial_wait_seconds: float = Field(
        default=0.5,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=4.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class OtpReceiverConfig(BaseSettings):
    """Root configuration for the receiver.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "OTP_"}

    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Socket timeout for every blocking mail store operation",
    )
    log_json: bool = Field(default=True, description="Render log lines as JSON")
    log_level: str = Field(default="INFO", description="Root log level name")

    endpoint: MailEndpoint = Field(default_factory=MailEndpoint)
    retry: RetryConfig = Field(default_factory=RetryConfig)
