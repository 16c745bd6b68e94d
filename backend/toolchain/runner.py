"""
Jagwatch Runner.

Builds and runs the entrypoint on the selected device.
Requires Python 3.11+.
"""

import asyncio
from pathlib import Path
from typing import Protocol

from toolchain.process import kill
from utils.config import RunnerSettings, get_settings
from utils.errors import RunError
from utils.logger import LoggerMixin
from watcher.generation import CancelScope


class Runner(Protocol):
    """Builds and executes a program on a device."""

    async def run(
        self,
        entrypoint: Path,
        device: str | None,
        assets_path: Path | None,
        optimization_level: int | None,
    ) -> None: ...


class JagRunner(LoggerMixin):
    """Runs programs through the `jag run` command."""

    def __init__(self, settings: RunnerSettings | None = None) -> None:
        self._settings = settings or get_settings().runner

    def command(
        self,
        entrypoint: Path,
        device: str | None,
        assets_path: Path | None,
        optimization_level: int | None,
    ) -> list[str]:
        cmd = [self._settings.command, "run", *self._settings.extra_args]
        if device:
            cmd += ["--device", device]
        if assets_path is not None:
            cmd += ["--assets", str(assets_path)]
        if optimization_level is not None:
            cmd.append(f"-O{optimization_level}")
        cmd.append(str(entrypoint))
        return cmd

    async def run(
        self,
        entrypoint: Path,
        device: str | None,
        assets_path: Path | None,
        optimization_level: int | None,
    ) -> None:
        """
        Build and run the program; output goes straight to the terminal.

        Cancellation kills the child process and does not wait for it.

        Raises:
            RunError: The command could not be started or failed
        """
        cmd = self.command(entrypoint, device, assets_path, optimization_level)
        try:
            proc = await asyncio.create_subprocess_exec(*cmd)
        except OSError as e:
            raise RunError(f"cannot start '{cmd[0]}': {e}") from e

        try:
            returncode = await proc.wait()
        except asyncio.CancelledError:
            kill(proc)
            raise

        if returncode != 0:
            raise RunError(f"run exited with status {returncode}", returncode=returncode)


class RunTask(LoggerMixin):
    """
    One build-and-run of the entrypoint per generation.

    Errors are reported and swallowed here; a failed run never ends
    the watch loop.
    """

    def __init__(
        self,
        entrypoint: Path,
        runner: Runner,
        device: str | None = None,
        assets_path: Path | None = None,
        optimization_level: int | None = None,
    ) -> None:
        self._entrypoint = entrypoint
        self._runner = runner
        self._device = device
        self._assets_path = assets_path
        self._optimization_level = optimization_level

    async def run(self, scope: CancelScope) -> None:
        if scope.cancelled:
            return
        try:
            await self._runner.run(
                self._entrypoint,
                self._device,
                self._assets_path,
                self._optimization_level,
            )
        except RunError as e:
            self.log.error("run_failed", entrypoint=str(self._entrypoint), error=str(e))
            return
        self.log.info("run_finished", entrypoint=str(self._entrypoint))

