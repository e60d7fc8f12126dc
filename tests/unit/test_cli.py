"""Unit tests for the fieldflow CLI."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from fieldflow import config as config_module
from fieldflow.auth.passwords import verify_password
from fieldflow.cli import app

runner = CliRunner()


class TestHashPassword:
    def test_prints_verifiable_hash(self):
        result = runner.invoke(app, ["hash-password", "--password", "hunter22", "--rounds", "4"])

        assert result.exit_code == 0
        hashed = result.output.strip().splitlines()[-1]
        assert verify_password("hunter22", hashed)

    def test_rejects_password_bcrypt_would_truncate(self):
        result = runner.invoke(app, ["hash-password", "--password", "x" * 80, "--rounds", "4"])

        assert result.exit_code != 0
        assert "$2b$" not in result.output


class TestDemoData:
    def test_lists_seed_accounts_and_projects(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)

        result = runner.invoke(app, ["demo-data"])

        assert result.exit_code == 0
        assert "ABC Construction" in result.output
        assert "maria.johnson" in result.output
        assert "admin123" not in result.output


class TestServe:
    @patch("uvicorn.run")
    def test_runs_app_factory(self, mock_run):
        result = runner.invoke(app, ["serve", "--port", "8123"])

        assert result.exit_code == 0
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args == ("fieldflow.web.app:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 8123
