"""
polldog

Polling file watcher: register a path, optionally ending in a single
``prefix*suffix`` wildcard segment, with a callback, and the callback runs
whenever a watched modification time moves forward.

Features:
- One polling thread per watch, stopped and joined on unwatch
- Wildcard watches announce themselves once on registration
- Injectable dispatcher for running callbacks on a host thread
- Disabled stub mode that runs each callback once and never polls
"""

from .models import WatchState

from .config import WatchdogConfig

from .exceptions import (
    WatchdogError,
    WatchNotFoundError,
    InvalidPatternError,
    MetadataUnavailableError,
)

from .pattern import PathPattern
from .tracker import ChangeTracker
from .dispatch import run_inline, MainThreadDispatcher
from .watcher import Watch
from .registry import Watchdog, SleepyWatchdog, set_mtime
from .api import (
    get_watchdog,
    reset_watchdog,
    shutdown,
    watch,
    unwatch,
    unwatch_all,
    touch,
    watch_asset,
    unwatch_asset,
    touch_asset,
)


__all__ = [
    # Models
    "WatchState",
    # Config
    "WatchdogConfig",
    # Exceptions
    "WatchdogError",
    "WatchNotFoundError",
    "InvalidPatternError",
    "MetadataUnavailableError",
    # Components
    "PathPattern",
    "ChangeTracker",
    "run_inline",
    "MainThreadDispatcher",
    "Watch",
    "Watchdog",
    "SleepyWatchdog",
    "set_mtime",
    # Default instance
    "get_watchdog",
    "reset_watchdog",
    "shutdown",
    "watch",
    "unwatch",
    "unwatch_all",
    "touch",
    "watch_asset",
    "unwatch_asset",
    "touch_asset",
]

__version__ = "0.1.0"
