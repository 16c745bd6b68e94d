"""
Jagwatch Subprocess Helpers.

Requires Python 3.11+.
"""

import asyncio


def kill(proc: asyncio.subprocess.Process) -> None:
    """Kill a child process if it is still running, without waiting for it."""
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        # Exited between the check and the signal
        pass
