"""Tests for fieldflow.core.logging."""

from __future__ import annotations

import logging

import pytest
import structlog

from fieldflow.core.logging import REDACTED, configure_logging, redact_secrets


class TestRedactSecrets:
    def test_masks_credentials(self):
        event = redact_secrets(
            None, "info", {"event": "login", "username": "admin", "password": "admin123", "token": "abc"}
        )

        assert event == {"event": "login", "username": "admin", "password": REDACTED, "token": REDACTED}

    def test_leaves_ordinary_events_alone(self):
        event = {"event": "project_created", "project_id": 4}

        assert redact_secrets(None, "info", dict(event)) == event


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        level = logging.getLogger().level
        yield
        logging.getLogger().setLevel(level)

    def test_sets_root_level(self):
        configure_logging("debug")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_quiet_loggers_follow_a_stricter_root(self):
        configure_logging("ERROR", json_logs=True)

        assert logging.getLogger("httpx").level == logging.ERROR

    def test_rendered_output_hides_password(self, capsys):
        configure_logging("INFO", json_logs=True)

        structlog.get_logger("fieldflow.test").info("login_failed", password="hunter22")

        out = capsys.readouterr().out
        assert "login_failed" in out
        assert "hunter22" not in out
