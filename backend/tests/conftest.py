"""
Jagwatch Test Configuration.

Pytest fixtures and fakes for the monitor, analyzer and runner.
Requires Python 3.11+.
"""

import asyncio
from pathlib import Path

import pytest

from utils.errors import AnalysisError, RunError
from watcher.monitor import MonitorItem


class FakeMonitor:
    """Directory registry plus an in-memory event channel."""

    def __init__(self) -> None:
        self.added: list[Path] = []
        self.removed: list[Path] = []
        self.fail_on: set[Path] = set()
        self.registered: set[Path] = set()
        self.queue: asyncio.Queue[MonitorItem] = asyncio.Queue()

    def add(self, directory: Path) -> None:
        if directory in self.fail_on:
            raise PermissionError(f"permission denied: '{directory}'")
        self.added.append(directory)
        self.registered.add(directory)

    def remove(self, directory: Path) -> None:
        self.removed.append(directory)
        self.registered.discard(directory)

    @property
    def directories(self) -> set[Path]:
        return set(self.registered)

    def lose(self, directory: Path) -> None:
        """Forget a directory the way a deleted watch root is forgotten."""
        self.registered.discard(directory)

    async def get(self) -> MonitorItem:
        return await self.queue.get()

    def emit(self, item: MonitorItem) -> None:
        self.queue.put_nowait(item)


class FakeAnalyzer:
    """Writes a canned dependency report, or fails like a broken compile."""

    def __init__(self, dependencies: list[str] | None = None) -> None:
        self.dependencies = dependencies or []
        self.fail = False
        self.calls = 0
        self.gate: asyncio.Event | None = None

    async def write_dependencies(self, entrypoint: Path, destination: Path) -> None:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise AnalysisError("main.toit:3:1: error: Unresolved identifier", returncode=1)
        destination.write_text("".join(f"{d}\n" for d in self.dependencies))


class FakeRunner:
    """Records runs; blocks until released when `block` is set."""

    def __init__(self, block: bool = False) -> None:
        self.block = block
        self.fail = False
        self.started = 0
        self.cancelled = 0
        self.calls: list[tuple] = []

    async def run(self, entrypoint, device, assets_path, optimization_level) -> None:
        self.started += 1
        self.calls.append((entrypoint, device, assets_path, optimization_level))
        try:
            if self.block:
                await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if self.fail:
            raise RunError("run exited with status 1", returncode=1)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def settle(rounds: int = 20) -> None:
    """Let pending tasks and callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def monitor() -> FakeMonitor:
    return FakeMonitor()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small project: main.toit plus lib/a.toit and lib/b.toit."""
    root = tmp_path.resolve()
    (root / "main.toit").write_text("import .lib.a\n\nmain:\n  print \"hello\"\n")
    lib = root / "lib"
    lib.mkdir()
    (lib / "a.toit").write_text("a: return 1\n")
    (lib / "b.toit").write_text("b: return 2\n")
    return root
