"""
Jagwatch Debouncer.

Coalesces bursts of writes into a single triggered action.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable
from enum import Enum


class WatchState(Enum):
    """States of the watch loop."""

    IDLE = "idle"
    DEBOUNCED = "debounced"
    SHUTDOWN = "shutdown"


class DebounceWindow:
    """
    A fixed-length window opened by an accepted edit.

    While the window is open further edits are coalesced into the one
    that opened it. The window closes once its duration has elapsed;
    closing it does not trigger anything by itself.

    The clock is injectable so the window can be driven without
    sleeping.
    """

    def __init__(
        self,
        delay_ms: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the window.

        Args:
            delay_ms: Window length in milliseconds
            clock: Monotonic clock returning seconds
        """
        self._delay = delay_ms / 1000.0
        self._clock = clock
        self._deadline: float | None = None

    @property
    def delay(self) -> float:
        """Window length in seconds."""
        return self._delay

    @property
    def fired(self) -> bool:
        """Whether an edit was accepted and the window is still open."""
        return self._deadline is not None

    @property
    def state(self) -> WatchState:
        return WatchState.DEBOUNCED if self.fired else WatchState.IDLE

    def try_fire(self) -> bool:
        """
        Accept an edit unless the window is already open.

        Returns:
            True if the edit opens a new window and should trigger
        """
        self.poll()
        if self.fired:
            return False
        self._deadline = self._clock() + self._delay
        return True

    def poll(self) -> bool:
        """
        Close the window if it has elapsed.

        Returns:
            True if the window was closed by this call
        """
        if self._deadline is None or self._clock() < self._deadline:
            return False
        self._deadline = None
        return True

    def remaining(self) -> float | None:
        """Seconds until the open window elapses, or None when idle."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def reset(self) -> None:
        """Close the window immediately."""
        self._deadline = None
