"""
Jagwatch Generations.

A generation is the cancellation scope of one accepted edit.
Requires Python 3.11+.
"""

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any


class CancelScope:
    """
    Groups the tasks started for one generation.

    Cancelling the scope requests cancellation of every task it spawned
    and returns immediately; tasks observe it at their next await.
    Finished tasks drop out of the scope on their own.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
        """Start `coro` as a task owned by this scope."""
        if self._cancelled:
            coro.close()
            raise RuntimeError("cannot spawn into a cancelled scope")
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        """Request cancellation without waiting for it to be observed."""
        self._cancelled = True
        for task in list(self._tasks):
            task.cancel()


@dataclass
class Generation:
    """One accepted edit and the probe/run pair started for it."""

    number: int
    scope: CancelScope = field(default_factory=CancelScope)

    def cancel(self) -> None:
        self.scope.cancel()
