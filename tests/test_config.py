"""Tests for otp_receiver.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from otp_receiver.config import MailEndpoint, OtpReceiverConfig, RetryConfig


class TestMailEndpoint:
    def test_defaults(self):
        cfg = MailEndpoint()
        assert cfg.protocol == "imap"
        assert cfg.host == "imap.gmail.com"
        assert cfg.port == 993

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MAIL_HOST", "imap.corp.com")
        monkeypatch.setenv("MAIL_PORT", "1993")
        cfg = MailEndpoint()
        assert cfg.host == "imap.corp.com"
        assert cfg.port == 1993

    def test_only_imap_supported(self):
        with pytest.raises(ValidationError):
            MailEndpoint(protocol="pop3")

    def test_immutable(self):
        cfg = MailEndpoint()
        with pytest.raises(ValidationError):
            cfg.host = "other"


class TestRetryConfig:
    def test_defaults(self):
        cfg = RetryConfig()
        assert cfg.max_attempts == 3
        assert cfg.initial_wait_seconds == 0.5
        assert cfg.max_wait_seconds == 4.0
        assert cfg.multiplier == 2.0


class TestOtpReceiverConfig:
    def test_defaults(self):
        cfg = OtpReceiverConfig()
        assert cfg.timeout_seconds == 30.0
        assert cfg.log_json is True
        assert cfg.log_level == "INFO"
        assert cfg.endpoint.host == "imap.gmail.com"
        assert cfg.retry.max_attempts == 3

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OTP_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("OTP_LOG_JSON", "false")
        monkeypatch.setenv("MAIL_HOST", "imap.test.com")
        cfg = OtpReceiverConfig()
        assert cfg.timeout_seconds == 5.0
        assert cfg.log_json is False
        assert cfg.endpoint.host == "imap.test.com"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            OtpReceiverConfig(timeout_seconds=0)
