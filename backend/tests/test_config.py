"""
Tests for Configuration.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from utils.config import AnalyzerSettings, RunnerSettings, get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.watcher.debounce_delay_ms == 100
        assert settings.analyzer.compiler_path == "toit.compile"
        assert settings.runner.command == "jag"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WATCHER_DEBOUNCE_DELAY_MS", "250")
        monkeypatch.setenv("RUNNER_COMMAND", "/opt/jag/jag")

        settings = get_settings()

        assert settings.watcher.debounce_delay_ms == 250
        assert settings.runner.command == "/opt/jag/jag"

    def test_sdk_path(self):
        settings = AnalyzerSettings(sdk_path=Path("/sdk"))
        assert settings.compiler_path == "/sdk/bin/toit.compile"

    def test_extra_args_from_csv(self):
        assert RunnerSettings(extra_args="--verbose, --no-color").extra_args == ["--verbose", "--no-color"]
