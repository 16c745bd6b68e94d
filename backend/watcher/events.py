"""
Jagwatch File Events.

Path-level events delivered by the platform monitor.
Requires Python 3.11+.
"""

from dataclasses import dataclass
from enum import Flag, auto
from pathlib import Path


class FileOp(Flag):
    """Kind of filesystem operation reported for a path."""

    WRITE = auto()
    CREATE = auto()
    REMOVE = auto()
    RENAME = auto()


@dataclass(frozen=True)
class FileEvent:
    """A single operation on a path inside a watched directory."""

    path: Path
    op: FileOp

    @property
    def is_write(self) -> bool:
        return bool(self.op & FileOp.WRITE)

    def __str__(self) -> str:
        return f"{self.op.name} {self.path}"
