"""
Jagwatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


class WatcherSettings(BaseSettings):
    """File watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    debounce_delay_ms: int = Field(default=100, ge=10, le=5000)
    observer_join_timeout: float = Field(
        default=5.0, ge=0.0, description="Seconds to wait for the observer thread on close"
    )


class AnalyzerSettings(BaseSettings):
    """Dependency analyzer (compiler) settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYZER_")

    sdk_path: Path | None = Field(default=None, description="SDK root containing bin/")
    compiler: str = Field(default="toit.compile")
    extra_args: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("extra_args", mode="before")
    @classmethod
    def parse_extra_args(cls, v: str | list[str]) -> list[str]:
        """Parse extra arguments from comma-separated string or list."""
        return _split_csv(v)

    @property
    def compiler_path(self) -> str:
        """Compiler executable, resolved against the SDK when one is set."""
        if self.sdk_path is None:
            return self.compiler
        return str(self.sdk_path / "bin" / self.compiler)


class RunnerSettings(BaseSettings):
    """Program runner settings."""

    model_config = SettingsConfigDict(env_prefix="RUNNER_")

    command: str = Field(default="jag")
    extra_args: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("extra_args", mode="before")
    @classmethod
    def parse_extra_args(cls, v: str | list[str]) -> list[str]:
        """Parse extra arguments from comma-separated string or list."""
        return _split_csv(v)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="jagwatch")
    app_version: str = Field(default="0.1.0")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    analyzer: AnalyzerSettings = Field(default_factory=AnalyzerSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
