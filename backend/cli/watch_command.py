"""
Jagwatch Watch Command.

Watches an entrypoint and its dependencies and re-runs it on every edit.
Requires Python 3.11+.

Usage:
    jagwatch main.toit --device my-esp32
"""

import argparse
import asyncio
import signal
import stat
import sys
from pathlib import Path

from toolchain.analyzer import Analyzer, SdkAnalyzer
from toolchain.probe import DependencyProbe
from toolchain.runner import JagRunner, Runner, RunTask
from utils.config import get_settings
from utils.errors import EntrypointError
from utils.logger import configure_logging, get_logger
from watcher.coordinator import Coordinator
from watcher.debouncer import DebounceWindow
from watcher.monitor import DirectoryMonitor
from watcher.watch_set import WatchSet

logger = get_logger("watch")


def resolve_entrypoint(name: str) -> Path:
    """
    Check that `name` is a file that can be watched.

    Raises:
        EntrypointError: Missing, unreadable or a directory
    """
    path = Path(name)
    try:
        mode = path.stat().st_mode
    except FileNotFoundError as e:
        raise EntrypointError(f"no such file or directory: '{name}'") from e
    except OSError as e:
        raise EntrypointError(f"can't stat file '{name}', reason: {e}") from e
    if stat.S_ISDIR(mode):
        raise EntrypointError(f"can't watch directory: '{name}'")
    return path


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog=settings.app_name,
        description="Watch for changes to <file> and its dependencies and automatically re-run the code",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.app_version}")
    parser.add_argument("file", help="Entrypoint to build and run")
    parser.add_argument("-d", "--device", default=None, help="use device with a given name, id, or address")
    parser.add_argument("--assets", type=Path, default=None, help="attach assets to the program")
    parser.add_argument(
        "-O",
        "--optimization-level",
        type=int,
        default=None,
        help="optimization level (compiler default when omitted)",
    )
    return parser


async def watch(
    entrypoint: Path,
    analyzer: Analyzer,
    runner: Runner,
    device: str | None = None,
    assets_path: Path | None = None,
    optimization_level: int | None = None,
) -> None:
    """Watch `entrypoint` until interrupted."""
    settings = get_settings()
    loop = asyncio.get_running_loop()

    with DirectoryMonitor(loop) as monitor:
        watch_set = WatchSet(monitor)
        probe = DependencyProbe(entrypoint, analyzer, watch_set)
        run_task = RunTask(entrypoint, runner, device, assets_path, optimization_level)
        coordinator = Coordinator(
            monitor,
            watch_set,
            probe.probe,
            run_task.run,
            DebounceWindow(settings.watcher.debounce_delay_ms),
        )

        task = asyncio.current_task()
        if task is not None:
            try:
                loop.add_signal_handler(signal.SIGTERM, task.cancel)
            except NotImplementedError:
                # Not available on Windows event loops
                pass

        logger.info("watching", entrypoint=str(entrypoint), device=device)
        try:
            await coordinator.run()
        except asyncio.CancelledError:
            logger.info("watch_cancelled")


def main(argv: list[str] | None = None) -> int:
    """Command line entry point."""
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        entrypoint = resolve_entrypoint(args.file)
    except EntrypointError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        asyncio.run(
            watch(
                entrypoint,
                SdkAnalyzer(),
                JagRunner(),
                device=args.device,
                assets_path=args.assets,
                optimization_level=args.optimization_level,
            )
        )
    except KeyboardInterrupt:
        logger.info("interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
