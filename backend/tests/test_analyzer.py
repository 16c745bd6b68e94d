"""
Tests for the Analyzer.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from toolchain.analyzer import SdkAnalyzer, parse_dependency_report
from utils.config import AnalyzerSettings
from utils.errors import AnalysisError


def _script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(0o755)
    return path


class TestParseDependencyReport:
    """Test cases for parse_dependency_report."""

    def test_strips_colon_and_whitespace(self, project: Path):
        a, b = project / "lib" / "a.toit", project / "lib" / "b.toit"
        report = f"{a}:\n  {b}  \n"

        assert parse_dependency_report(report) == {a, b}

    def test_drops_missing_paths(self, project: Path):
        report = f"{project / 'main.toit'}\n{project / 'missing.toit'}:\n"

        assert parse_dependency_report(report) == {project / "main.toit"}

    def test_deduplicates(self, project: Path):
        main = project / "main.toit"
        report = f"{main}:\n{main}\n{main}:\n"

        assert parse_dependency_report(report) == {main}

    def test_empty_report(self):
        assert parse_dependency_report("") == set()
        assert parse_dependency_report("\n\n  \n") == set()


class TestSdkAnalyzer:
    """Test cases for SdkAnalyzer."""

    def test_command_uses_sdk_path(self, tmp_path: Path):
        analyzer = SdkAnalyzer(AnalyzerSettings(sdk_path=tmp_path / "sdk"))
        cmd = analyzer.command(Path("main.toit"), Path("/tmp/deps.txt"))

        assert cmd == [
            str(tmp_path / "sdk" / "bin" / "toit.compile"),
            "--analyze",
            "--dependency-file",
            "/tmp/deps.txt",
            "--dependency-format",
            "plain",
            "main.toit",
        ]

    @pytest.mark.asyncio
    async def test_writes_report(self, tmp_path: Path, project: Path):
        compiler = _script(tmp_path / "compile.sh", 'printf "%s:\\n" "$6" > "$3"\n')
        analyzer = SdkAnalyzer(AnalyzerSettings(compiler=str(compiler)))
        report = tmp_path / "deps.txt"

        await analyzer.write_dependencies(project / "main.toit", report)

        assert parse_dependency_report(report.read_text()) == {project / "main.toit"}

    @pytest.mark.asyncio
    async def test_compile_error_raises(self, tmp_path: Path, project: Path):
        compiler = _script(tmp_path / "compile.sh", 'echo "main.toit:1:1: error: broken" >&2\nexit 1\n')
        analyzer = SdkAnalyzer(AnalyzerSettings(compiler=str(compiler)))

        with pytest.raises(AnalysisError) as exc_info:
            await analyzer.write_dependencies(project / "main.toit", tmp_path / "deps.txt")

        assert exc_info.value.returncode == 1
        assert "broken" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_compiler_raises(self, tmp_path: Path, project: Path):
        analyzer = SdkAnalyzer(AnalyzerSettings(compiler=str(tmp_path / "no-such-compiler")))

        with pytest.raises(AnalysisError):
            await analyzer.write_dependencies(project / "main.toit", tmp_path / "deps.txt")
