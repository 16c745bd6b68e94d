"""
Jagwatch Errors.

Only EntrypointError escapes the watch loop; everything else is
reported where it happens and the loop keeps going.
"""

from pathlib import Path


class WatchRunError(Exception):
    """Base class for jagwatch errors."""


class EntrypointError(WatchRunError):
    """The entrypoint cannot be watched (missing, unreadable or a directory)."""


class AnalysisError(WatchRunError):
    """The analyzer failed to produce a dependency report."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class RunError(WatchRunError):
    """Building or running the entrypoint failed."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class WatchSetError(WatchRunError):
    """A path handed to the watch set could not be resolved."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot resolve '{path}': {reason}")
        self.path = path


class MonitorError(WatchRunError):
    """Error reported by the platform file monitor."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
