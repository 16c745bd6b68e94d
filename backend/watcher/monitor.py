"""
Jagwatch Directory Monitor.

Non-recursive, per-directory file system monitoring using watchdog.
Requires Python 3.11+.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import (
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
    FileCreatedEvent,
    FileModifiedEvent,
    FileDeletedEvent,
    FileMovedEvent,
)
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from utils.config import get_settings
from utils.errors import MonitorError
from utils.logger import LoggerMixin
from watcher.events import FileEvent, FileOp

# Channel items: an event, an error, or None once the monitor is closed
MonitorItem = FileEvent | MonitorError | None


class ForwardingHandler(FileSystemEventHandler):
    """
    Translates watchdog file events into FileEvents.

    Directory events are dropped; only files inside a watched
    directory are of interest. The one exception is a watched
    directory itself going away, which is reported through `root_lost`.
    """

    def __init__(
        self,
        publish: Callable[[MonitorItem], None],
        root_lost: Callable[[Path], bool] | None = None,
    ) -> None:
        super().__init__()
        self._publish = publish
        self._root_lost = root_lost

    def dispatch(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            # The emitter stops once its own directory is deleted or moved away
            if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED) and self._root_lost is not None:
                self._root_lost(Path(event.src_path))
            return
        try:
            super().dispatch(event)
        except Exception as e:
            self._publish(MonitorError(f"failed to handle {event.event_type} event: {e}"))

    def on_created(self, event: FileCreatedEvent) -> None:
        self._publish(FileEvent(Path(event.src_path), FileOp.CREATE))

    def on_modified(self, event: FileModifiedEvent) -> None:
        self._publish(FileEvent(Path(event.src_path), FileOp.WRITE))

    def on_deleted(self, event: FileDeletedEvent) -> None:
        self._publish(FileEvent(Path(event.src_path), FileOp.REMOVE))

    def on_moved(self, event: FileMovedEvent) -> None:
        # Source disappears, destination shows up
        self._publish(FileEvent(Path(event.src_path), FileOp.RENAME))
        self._publish(FileEvent(Path(event.dest_path), FileOp.CREATE))


class DirectoryMonitor(LoggerMixin):
    """
    Watches individual directories and exposes their events as a channel.

    The observer thread hands items to the asyncio loop; the loop
    consumes them with `get()`. Closing the monitor stops the observer
    and closes the channel.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        observer_factory: Callable[[], Any] = Observer,
        join_timeout: float | None = None,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            loop: Event loop that consumes the channel (defaults to the running loop)
            observer_factory: Factory for the watchdog observer
            join_timeout: Seconds to wait for the observer thread on close
        """
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[MonitorItem] = asyncio.Queue()
        self._observer = observer_factory()
        self._handler = ForwardingHandler(self._publish, self._root_lost)
        self._watches: dict[Path, ObservedWatch] = {}
        self._join_timeout = (
            join_timeout
            if join_timeout is not None
            else get_settings().watcher.observer_join_timeout
        )
        self._running = False
        self._closed = False

    def _publish(self, item: MonitorItem) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, item)

    def _root_lost(self, directory: Path) -> bool:
        """
        Called from the observer thread for directory deletes and moves.

        Returns:
            True if `directory` is a registered root
        """
        watch = self._watches.get(directory)
        if watch is None or self._loop.is_closed():
            return False
        self._loop.call_soon_threadsafe(self._drop_root, directory, watch)
        return True

    def _drop_root(self, directory: Path, watch: ObservedWatch) -> None:
        # A newer registration of the same directory stays untouched
        if self._watches.get(directory) is not watch:
            return
        self.remove(directory)
        self.log.warning("watched_directory_vanished", path=str(directory))
        self._queue.put_nowait(
            MonitorError(f"watched directory vanished: '{directory}'", path=directory)
        )

    def start(self) -> None:
        """Start the observer thread."""
        if self._running:
            return
        self._observer.start()
        self._running = True
        self.log.debug("directory_monitor_started")

    def add(self, directory: Path) -> None:
        """
        Register a directory (non-recursive).

        Raises:
            OSError: The directory cannot be watched
        """
        if directory in self._watches:
            return
        self._watches[directory] = self._observer.schedule(
            self._handler, str(directory), recursive=False
        )
        self.log.debug("directory_added", path=str(directory))

    def remove(self, directory: Path) -> None:
        """Unregister a directory; unknown directories are ignored."""
        watch = self._watches.pop(directory, None)
        if watch is None:
            return
        try:
            self._observer.unschedule(watch)
        except KeyError:
            # The emitter already went away with its directory
            self.log.debug("directory_already_unwatched", path=str(directory))
        self.log.debug("directory_removed", path=str(directory))

    @property
    def directories(self) -> set[Path]:
        """Directories currently registered."""
        return set(self._watches)

    async def get(self) -> MonitorItem:
        """Wait for the next event or error; None means the monitor closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        """Stop the observer and close the channel."""
        if self._closed:
            return
        self._closed = True
        if self._running:
            self._observer.stop()
            self._observer.join(timeout=self._join_timeout)
            self._running = False
        self._watches.clear()
        self._queue.put_nowait(None)
        self.log.debug("directory_monitor_closed")

    def __enter__(self) -> "DirectoryMonitor":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
