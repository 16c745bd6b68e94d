"""
Jagwatch Command Line Package.

Requires Python 3.11+.
"""

from cli.watch_command import build_parser, main, resolve_entrypoint, watch

__all__ = ["build_parser", "main", "resolve_entrypoint", "watch"]
