"""Unit tests for FieldFlowPM configuration management.

Tests AppConfig loading from environment variables, validation, and defaults.
"""

from __future__ import annotations

import pytest

from fieldflow import config as config_module
from fieldflow.config import AppConfig, get_config


class TestAppConfig:
    """Test AppConfig creation and validation."""

    def test_defaults(self, monkeypatch):
        """Unset variables fall back to development defaults."""
        for name in ("ENVIRONMENT", "LOG_FORMAT", "SESSION_BACKEND", "BCRYPT_ROUNDS"):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig.from_env()

        assert config.environment == "development"
        assert config.log_format == "console"
        assert config.session.ttl_hours == 24
        assert config.session.ttl_seconds == 86400
        assert config.session.cookie_name == "sessionId"
        assert config.session.cookie_secure is False
        assert config.session.backend == "memory"
        assert config.security.bcrypt_rounds == 12
        assert config.seed.enabled is True
        assert config.seed.admin_password == "admin123"

    def test_session_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("SESSION_TTL_HOURS", "2")
        monkeypatch.setenv("SESSION_COOKIE_NAME", "ff_session")
        monkeypatch.setenv("SESSION_BACKEND", "Redis")
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/3")

        config = AppConfig.from_env()

        assert config.session.ttl_seconds == 7200
        assert config.session.cookie_name == "ff_session"
        assert config.session.backend == "redis"
        assert config.session.redis_url == "redis://cache:6379/3"

    def test_boolean_flags(self, monkeypatch):
        monkeypatch.setenv("ENABLE_METRICS", "no")
        monkeypatch.setenv("SEED_DEMO_DATA", "0")

        config = AppConfig.from_env()

        assert config.enable_metrics is False
        assert config.seed.enabled is False

    def test_production_requires_seed_password(self, monkeypatch):
        """Production with demo seeding must not use the demo admin password."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)
        monkeypatch.delenv("SEED_DEMO_DATA", raising=False)

        with pytest.raises(KeyError) as exc_info:
            AppConfig.from_env()

        assert "SEED_ADMIN_PASSWORD" in str(exc_info.value)

    def test_production_defaults(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("SEED_ADMIN_PASSWORD", "a-long-random-secret")
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("SESSION_COOKIE_SECURE", raising=False)

        config = AppConfig.from_env()

        assert config.is_production
        assert config.log_format == "json"
        assert config.session.cookie_secure is True

    def test_production_without_seeding_is_allowed(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("SEED_DEMO_DATA", "false")
        monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)

        assert AppConfig.from_env().seed.enabled is False


class TestGetConfig:
    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)

        first = get_config()
        second = get_config()

        assert first is second
