"""
Jagwatch Utilities Package.

Configuration, logging and shared errors.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.errors import (
    AnalysisError,
    EntrypointError,
    MonitorError,
    RunError,
    WatchRunError,
    WatchSetError,
)
from utils.logger import configure_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
    "WatchRunError",
    "EntrypointError",
    "AnalysisError",
    "RunError",
    "WatchSetError",
    "MonitorError",
]
