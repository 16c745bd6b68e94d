"""
Jagwatch File Watcher Package.

Watch set bookkeeping, event filtering, debouncing and the watch loop.
Requires Python 3.11+.
"""

from watcher.coordinator import Coordinator
from watcher.debouncer import DebounceWindow, WatchState
from watcher.event_filter import EventFilter, Verdict
from watcher.events import FileEvent, FileOp
from watcher.generation import CancelScope, Generation
from watcher.monitor import DirectoryMonitor
from watcher.watch_set import WatchSet

__all__ = [
    "CancelScope",
    "Coordinator",
    "DebounceWindow",
    "DirectoryMonitor",
    "EventFilter",
    "FileEvent",
    "FileOp",
    "Generation",
    "Verdict",
    "WatchSet",
    "WatchState",
]
