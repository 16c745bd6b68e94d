"""
Jagwatch Watch Set.

The directories registered with the monitor and the files that matter.
Requires Python 3.11+.
"""

import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from utils.errors import WatchSetError
from utils.logger import LoggerMixin


class DirectoryRegistry(Protocol):
    """The part of the platform monitor the watch set drives."""

    def add(self, directory: Path) -> None: ...

    def remove(self, directory: Path) -> None: ...

    @property
    def directories(self) -> set[Path]: ...


class WatchSet(LoggerMixin):
    """
    Owns the registered directories and the relevant paths.

    `watch()` replaces the relevant paths wholesale and registers or
    unregisters directories so that the registered set matches the
    directories of the relevant paths. A relevant path that is itself a
    directory is registered directly. Only events on a relevant path
    itself count, never on its siblings.

    Directories the registry lost on its own (deleted or moved away) are
    registered again by the next `watch()` that still needs them.

    Reads and writes are serialized by a lock; the event matching path
    never sees a half-applied update.
    """

    def __init__(self, registry: DirectoryRegistry) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._directories: set[Path] = set()
        self._paths: frozenset[Path] = frozenset()

    def watch(self, paths: Iterable[Path]) -> None:
        """
        Replace the watched paths.

        Args:
            paths: Files (or directories) whose edits should be observed

        Raises:
            WatchSetError: A path could not be resolved; nothing is changed
        """
        with self._lock:
            resolved: set[Path] = set()
            for p in paths:
                try:
                    resolved.add(Path(p).resolve(strict=True))
                except (OSError, RuntimeError) as e:
                    raise WatchSetError(Path(p), str(e)) from e

            wanted = {p if p.is_dir() else p.parent for p in resolved}

            live = self._directories & self._registry.directories
            registered = live & wanted
            for directory in sorted(wanted - live):
                try:
                    self._registry.add(directory)
                except OSError as e:
                    # Best effort; the next watch() retries it
                    self.log.error("watch_registration_failed", path=str(directory), error=str(e))
                    continue
                registered.add(directory)

            for directory in sorted(self._directories - wanted):
                self._registry.remove(directory)

            self._directories = registered
            self._paths = frozenset(resolved)

        self.log.debug("watch_set_updated", paths=len(resolved), directories=len(registered))

    def is_relevant(self, path: Path) -> bool:
        """Whether an event on `path` concerns a watched file."""
        with self._lock:
            return path in self._paths

    def count(self) -> int:
        """Number of relevant paths tracked."""
        with self._lock:
            return len(self._paths)

    @property
    def paths(self) -> frozenset[Path]:
        with self._lock:
            return self._paths

    @property
    def directories(self) -> frozenset[Path]:
        with self._lock:
            return frozenset(self._directories)
