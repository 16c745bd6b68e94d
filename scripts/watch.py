#!/usr/bin/env python3
"""
Jagwatch Watch Script.

Runs the watch command from a source checkout.
Requires Python 3.11+.

Usage:
    python scripts/watch.py path/to/main.toit --device my-esp32
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from cli.watch_command import main


if __name__ == "__main__":
    sys.exit(main())
