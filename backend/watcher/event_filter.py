"""
Jagwatch Event Filter.

Decides which monitor events should trigger a rebuild.
Requires Python 3.11+.
"""

from enum import Enum

from watcher.events import FileEvent
from watcher.watch_set import WatchSet


class Verdict(Enum):
    """Classification of a single file event."""

    IGNORED = "ignored"  # not a file we are watching
    NOISE = "noise"  # a watched file, but not a write
    TRIGGER = "trigger"  # a write to a watched file


class EventFilter:
    """Classifies raw events against the current watch set."""

    def __init__(self, watch_set: WatchSet) -> None:
        self._watch_set = watch_set

    def classify(self, event: FileEvent) -> Verdict:
        if not self._watch_set.is_relevant(event.path):
            return Verdict.IGNORED
        if event.is_write:
            return Verdict.TRIGGER
        return Verdict.NOISE
