"""Shared types for the polldog package."""

from enum import Enum
from pathlib import Path
from typing import Callable


class WatchState(Enum):
    """Lifecycle states of a single watch."""
    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


# Called with the watched path (or directory + pattern) on change
Callback = Callable[[Path], None]

# Runs a zero-argument thunk, possibly on another thread
Dispatcher = Callable[[Callable[[], None]], None]
