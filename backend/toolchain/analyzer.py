"""
Jagwatch Analyzer.

Asks the compiler for the dependency closure of an entrypoint.
Requires Python 3.11+.
"""

import asyncio
from pathlib import Path
from typing import Protocol

from toolchain.process import kill
from utils.config import AnalyzerSettings, get_settings
from utils.errors import AnalysisError
from utils.logger import LoggerMixin


class Analyzer(Protocol):
    """Writes a plain-text dependency report for an entrypoint."""

    async def write_dependencies(self, entrypoint: Path, destination: Path) -> None: ...


def parse_dependency_report(text: str) -> set[Path]:
    """
    Parse a plain dependency report.

    One path per line, optionally followed by ':'. Paths that do not
    exist on disk are dropped.

    Args:
        text: Report contents

    Returns:
        Deduplicated set of existing paths
    """
    paths: set[Path] = set()
    for line in text.splitlines():
        name = line.strip().removesuffix(":").strip()
        if not name:
            continue
        path = Path(name)
        if path.exists():
            paths.add(path)
    return paths


class SdkAnalyzer(LoggerMixin):
    """
    Runs the SDK compiler in analysis mode.

    Equivalent to:
        toit.compile --analyze --dependency-file <dest> --dependency-format plain <entrypoint>
    """

    def __init__(self, settings: AnalyzerSettings | None = None) -> None:
        self._settings = settings or get_settings().analyzer

    def command(self, entrypoint: Path, destination: Path) -> list[str]:
        return [
            self._settings.compiler_path,
            "--analyze",
            *self._settings.extra_args,
            "--dependency-file",
            str(destination),
            "--dependency-format",
            "plain",
            str(entrypoint),
        ]

    async def write_dependencies(self, entrypoint: Path, destination: Path) -> None:
        """
        Write the dependency report for `entrypoint` to `destination`.

        Raises:
            AnalysisError: The compiler could not be started or reported errors
        """
        cmd = self.command(entrypoint, destination)
        self.log.debug("analyzer_started", command=cmd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise AnalysisError(f"cannot start analyzer '{cmd[0]}': {e}") from e

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            kill(proc)
            raise

        if proc.returncode != 0:
            output = (stderr or stdout).decode(errors="replace").strip()
            raise AnalysisError(
                output or f"analyzer exited with status {proc.returncode}",
                returncode=proc.returncode,
            )
