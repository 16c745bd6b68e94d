"""
Tests for Logging Setup.

Requires Python 3.11+.
"""

import json

import pytest
import structlog

from utils.config import get_settings
from utils.logger import LoggerMixin, configure_logging


@pytest.fixture(autouse=True)
def restore_structlog():
    get_settings.cache_clear()
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()


class Component(LoggerMixin):
    pass


class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_json_events_go_to_stderr(self, monkeypatch: pytest.MonkeyPatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()

        Component().log.info("file_modified", path="main.toit")

        captured = capsys.readouterr()
        assert captured.out == ""
        entry = json.loads(captured.err.strip().splitlines()[-1])
        assert entry["event"] == "file_modified"
        assert entry["path"] == "main.toit"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_level_filters_debug(self, monkeypatch: pytest.MonkeyPatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        configure_logging()

        Component().log.info("watch_set_updated")

        assert capsys.readouterr().err == ""
