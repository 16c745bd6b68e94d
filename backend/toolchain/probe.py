"""
Jagwatch Dependency Probe.

Keeps the watch set in line with the entrypoint's dependencies.
Requires Python 3.11+.
"""

import os
import tempfile
from pathlib import Path

from toolchain.analyzer import Analyzer, parse_dependency_report
from utils.errors import AnalysisError, WatchSetError
from utils.logger import LoggerMixin
from watcher.generation import CancelScope
from watcher.watch_set import WatchSet


class DependencyProbe(LoggerMixin):
    """
    Re-resolves the dependency closure and updates the watch set.

    A failed analysis keeps an existing watch set as is, so a broken
    edit does not stop the watcher from seeing the fix. Without one, or
    when the report names no existing file, only the entrypoint itself
    is watched (through its directory).
    """

    def __init__(self, entrypoint: Path, analyzer: Analyzer, watch_set: WatchSet) -> None:
        self._entrypoint = entrypoint
        self._analyzer = analyzer
        self._watch_set = watch_set

    @property
    def fallback(self) -> set[Path]:
        # The directory only stands in when the entrypoint itself is gone
        if self._entrypoint.exists():
            return {self._entrypoint}
        return {self._entrypoint.parent}

    async def collect(self) -> set[Path]:
        """
        Run the analyzer and parse its report.

        Raises:
            AnalysisError: The analyzer failed
        """
        fd, name = tempfile.mkstemp(suffix=".txt")
        os.close(fd)
        report = Path(name)
        try:
            await self._analyzer.write_dependencies(self._entrypoint, report)
            return parse_dependency_report(report.read_text(errors="replace"))
        finally:
            report.unlink(missing_ok=True)

    async def probe(self, scope: CancelScope) -> None:
        """Resolve dependencies for one generation and apply them."""
        try:
            paths = await self.collect()
        except AnalysisError as e:
            if self._watch_set.count() > 0:
                self.log.warning("analysis_failed_keeping_watch_set", error=str(e))
                return
            self.log.warning("analysis_failed", error=str(e))
            paths = set()
        except OSError as e:
            # Report could not be created or read
            self.log.error("dependency_report_unavailable", error=str(e))
            paths = set()

        if scope.cancelled:
            self.log.debug("dependency_update_discarded")
            return

        if not paths:
            paths = self.fallback

        try:
            self._watch_set.watch(paths)
        except WatchSetError as e:
            self.log.error("failed_to_update_watcher", error=str(e))
            return

        self.log.debug("dependencies_updated", count=len(paths))

