"""
Jagwatch Toolchain Package.

Adapters for the compiler's dependency analysis and for running programs.
Requires Python 3.11+.
"""

from toolchain.analyzer import Analyzer, SdkAnalyzer, parse_dependency_report
from toolchain.probe import DependencyProbe
from toolchain.runner import JagRunner, Runner, RunTask

__all__ = [
    "Analyzer",
    "DependencyProbe",
    "JagRunner",
    "Runner",
    "RunTask",
    "SdkAnalyzer",
    "parse_dependency_report",
]
