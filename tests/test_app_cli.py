"""
Unit tests for social.graze.skylink.app.cli and the resolve command
"""

import json
import logging
import sys

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from social.graze.skylink.app.cli import configure_logging, configure_sentry
from social.graze.skylink.app.config import Settings
from social.graze.skylink.app.orchestrator import ResolutionResult
from social.graze.skylink.resolve.__main__ import realMain


class TestConfigureLogging:
    """Test suite for configure_logging function."""

    def test_debug_level(self, monkeypatch):
        monkeypatch.delenv("LOGGING_CONFIG_FILE", raising=False)
        configure_logging(Settings(debug=True))
        assert logging.getLogger().level == logging.DEBUG

    def test_info_level(self, monkeypatch):
        monkeypatch.delenv("LOGGING_CONFIG_FILE", raising=False)
        configure_logging(Settings(debug=False))
        assert logging.getLogger().level == logging.INFO

    def test_config_file(self, monkeypatch, tmp_path):
        config_file = tmp_path / "logging.json"
        config_file.write_text(
            json.dumps(
                {
                    "version": 1,
                    "disable_existing_loggers": False,
                    "loggers": {"social.graze.skylink.cli_test": {"level": "WARNING"}},
                }
            )
        )
        monkeypatch.setenv("LOGGING_CONFIG_FILE", str(config_file))

        configure_logging()

        assert logging.getLogger("social.graze.skylink.cli_test").level == logging.WARNING


class TestConfigureSentry:
    """Test suite for configure_sentry function."""

    @patch("social.graze.skylink.app.cli.sentry_sdk")
    def test_without_dsn(self, mock_sentry):
        configure_sentry(Settings(sentry_dsn=None))
        mock_sentry.init.assert_not_called()

    @patch("social.graze.skylink.app.cli.sentry_sdk")
    def test_with_dsn(self, mock_sentry):
        configure_sentry(Settings(sentry_dsn="https://key@sentry.example/1"))
        mock_sentry.init.assert_called_once_with(dsn="https://key@sentry.example/1")


class TestResolveCommand:
    """Test suite for the resolve command."""

    @pytest.fixture
    def orchestrator(self):
        with patch(
            "social.graze.skylink.resolve.__main__.create_client_session"
        ) as mock_create, patch(
            "social.graze.skylink.resolve.__main__.ResolutionOrchestrator"
        ) as mock_orchestrator_class:
            mock_create.return_value.__aenter__.return_value = MagicMock()
            mock_create.return_value.__aexit__.return_value = False
            instance = mock_orchestrator_class.return_value
            instance.handle = AsyncMock()
            yield mock_orchestrator_class

    @pytest.mark.asyncio
    async def test_prints_results(self, orchestrator, monkeypatch, capsys):
        orchestrator.return_value.handle.side_effect = [
            ResolutionResult.noop(),
            ResolutionResult.bridge("https://bsky.brid.gy/ap/alice.example"),
            ResolutionResult.pds("https://pds.example/xrpc/x"),
        ]
        monkeypatch.setattr(sys, "argv", ["resolve", "a", "b", "c"])

        await realMain()

        assert capsys.readouterr().out.splitlines() == [
            "a noop",
            "b bridged https://bsky.brid.gy/ap/alice.example",
            "c pds https://pds.example/xrpc/x",
        ]

    @pytest.mark.asyncio
    async def test_fallback_and_direct(self, orchestrator, monkeypatch):
        orchestrator.return_value.handle.return_value = ResolutionResult.noop()
        monkeypatch.delenv("FALLBACK_BEHAVIOR", raising=False)
        monkeypatch.setattr(
            sys,
            "argv",
            ["resolve", "--direct", "--fallback", "openPds", "https://bsky.app/x"],
        )

        await realMain()

        config = orchestrator.call_args.args[1]
        assert config.current.fallback_behavior.value == "openPds"
        assert orchestrator.return_value.handle.call_args.kwargs["direct"] is True
