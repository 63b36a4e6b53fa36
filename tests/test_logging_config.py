"""Tests for diffscribe.logging_config module."""

import logging

import pytest
import structlog

from diffscribe import logging_config


@pytest.fixture
def fresh_logging(monkeypatch):
    """Run configure_logging against a clean root logger and restore it afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_single_handler(self, fresh_logging):
        logging_config.configure_logging(logging.DEBUG)

        assert fresh_logging.level == logging.DEBUG
        assert len(fresh_logging.handlers) == 1
        formatter = fresh_logging.handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)

    def test_second_call_only_changes_level(self, fresh_logging):
        logging_config.configure_logging(logging.DEBUG)
        handler = fresh_logging.handlers[0]

        logging_config.configure_logging(logging.WARNING)

        assert fresh_logging.handlers == [handler]
        assert fresh_logging.level == logging.WARNING

    def test_json_renderer(self, monkeypatch):
        monkeypatch.setenv("DIFFSCRIBE_LOG_FORMAT", "json")
        assert isinstance(logging_config._select_renderer(), structlog.processors.JSONRenderer)

    def test_console_renderer_by_default(self, monkeypatch):
        monkeypatch.delenv("DIFFSCRIBE_LOG_FORMAT", raising=False)
        assert isinstance(logging_config._select_renderer(), structlog.dev.ConsoleRenderer)
