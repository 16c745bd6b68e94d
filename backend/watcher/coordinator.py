"""
Jagwatch Coordinator.

The watch loop: debounces edits and restarts the probe/run pair
under a fresh generation for every accepted edit.
Requires Python 3.11+.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

from utils.errors import MonitorError
from utils.logger import LoggerMixin
from watcher.debouncer import DebounceWindow, WatchState
from watcher.event_filter import EventFilter, Verdict
from watcher.events import FileEvent
from watcher.generation import CancelScope, Generation
from watcher.monitor import MonitorItem
from watcher.watch_set import WatchSet

GenerationTask = Callable[[CancelScope], Awaitable[None]]


class EventSource(Protocol):
    """Channel of monitor items; None means the channel closed."""

    async def get(self) -> MonitorItem: ...


class Coordinator(LoggerMixin):
    """
    Single-threaded state machine driving the watch loop.

    Generation 0 is started as soon as the loop runs. Afterwards the
    loop waits on the monitor channel, bounded by the debounce window
    while it is open. A relevant write outside an open window cancels
    the current generation and starts the next one; writes inside the
    window are coalesced. The loop ends when the channel closes or the
    task running it is cancelled, cancelling the current generation on
    the way out.

    The probe and run callables only ever touch the WatchSet; all other
    state belongs to the loop.
    """

    def __init__(
        self,
        source: EventSource,
        watch_set: WatchSet,
        probe: GenerationTask,
        run: GenerationTask,
        debounce: DebounceWindow | None = None,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            source: Monitor channel to consume
            watch_set: Watch set the events are matched against
            probe: Dependency probe, called with each generation's scope
            run: Build-and-run task, called with each generation's scope
            debounce: Debounce window (defaults to 100ms)
        """
        self._source = source
        self._filter = EventFilter(watch_set)
        self._probe = probe
        self._run = run
        self._debounce = debounce or DebounceWindow()
        self._current: Generation | None = None
        self._shutdown = False

    @property
    def state(self) -> WatchState:
        if self._shutdown:
            return WatchState.SHUTDOWN
        return self._debounce.state

    @property
    def current(self) -> Generation | None:
        """The generation whose tasks are logically active."""
        return self._current

    async def run(self) -> None:
        """Run the watch loop until the channel closes or the task is cancelled."""
        self._start_generation()
        try:
            while True:
                if self._debounce.poll():
                    self.log.debug("debounce_window_closed")
                try:
                    item = await asyncio.wait_for(
                        self._source.get(), timeout=self._debounce.remaining()
                    )
                except TimeoutError:
                    continue

                if item is None:
                    self.log.info("watcher_closed")
                    break
                if isinstance(item, MonitorError):
                    self.log.error("watch_error", error=str(item))
                    continue
                self.handle_event(item)
        finally:
            self._stop()

    def handle_event(self, event: FileEvent) -> bool:
        """
        Apply one file event to the state machine.

        Returns:
            True if the event started a new generation
        """
        if self._shutdown:
            return False

        verdict = self._filter.classify(event)
        if verdict is not Verdict.TRIGGER:
            return False

        if not self._debounce.try_fire():
            self.log.debug("edit_coalesced", path=str(event.path))
            return False

        self.log.info("file_modified", path=str(event.path))
        self._start_generation()
        return True

    def _start_generation(self) -> Generation:
        previous = self._current
        if previous is not None:
            previous.cancel()

        generation = Generation(0 if previous is None else previous.number + 1)
        self._current = generation

        scope = generation.scope
        for name, task_fn in (("probe", self._probe), ("run", self._run)):
            task = scope.spawn(task_fn(scope), name=f"{name}-{generation.number}")
            task.add_done_callback(self._report_task_failure)

        self.log.debug("generation_started", generation=generation.number)
        return generation

    def _report_task_failure(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.log.error("generation_task_failed", task=task.get_name(), error=repr(exc))

    def _stop(self) -> None:
        if self._shutdown:
            return
        self._shutdown = True
        self._debounce.reset()
        if self._current is not None:
            self._current.cancel()
        self.log.info("watch_loop_stopped")
