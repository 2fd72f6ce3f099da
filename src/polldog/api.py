"""
Process-wide default watchdog and module-level shortcuts.

The default instance is created on first use. Its type follows
WatchdogConfig.is_enabled(): the polling Watchdog, or SleepyWatchdog when
disabled (the default under ``python -O``). All watches are stopped when
the interpreter exits.
"""

import atexit
import logging
import threading
from typing import Optional, Union

from .config import WatchdogConfig
from .models import Callback
from .registry import PathLike, SleepyWatchdog, Timestamp, Watchdog

logger = logging.getLogger(__name__)

_default: Optional[Union[Watchdog, SleepyWatchdog]] = None
_default_lock = threading.Lock()
_atexit_registered = False


def _create(config: WatchdogConfig, **kwargs) -> Union[Watchdog, SleepyWatchdog]:
    if config.is_enabled():
        return Watchdog(config, **kwargs)
    logger.debug("Watchdog disabled, callbacks run once on watch()")
    return SleepyWatchdog(config, **kwargs)


def get_watchdog() -> Union[Watchdog, SleepyWatchdog]:
    """Get the default watchdog, creating it on first use."""
    global _default, _atexit_registered
    with _default_lock:
        if _default is None:
            _default = _create(WatchdogConfig.from_env())
            if not _atexit_registered:
                atexit.register(shutdown)
                _atexit_registered = True
        return _default


def reset_watchdog(config: Optional[WatchdogConfig] = None, **kwargs) -> Union[Watchdog, SleepyWatchdog]:
    """
    Close the default watchdog and replace it.

    Args:
        config: Configuration for the new instance, defaults to the environment
        **kwargs: Passed to the constructor (dispatcher, on_error, asset_resolver)

    Returns:
        The new default watchdog
    """
    global _default, _atexit_registered
    with _default_lock:
        previous = _default
        _default = _create(config if config is not None else WatchdogConfig.from_env(), **kwargs)
        if not _atexit_registered:
            atexit.register(shutdown)
            _atexit_registered = True
    if previous is not None:
        previous.close()
    return _default


def shutdown() -> None:
    """Stop every watch of the default watchdog and drop it."""
    global _default
    with _default_lock:
        previous = _default
        _default = None
    if previous is not None:
        previous.close()


def watch(path: PathLike, callback: Optional[Callback]) -> bool:
    return get_watchdog().watch(path, callback)


def unwatch(path: PathLike) -> bool:
    return get_watchdog().unwatch(path)


def unwatch_all() -> int:
    return get_watchdog().unwatch_all()


def touch(path: PathLike, mtime: Optional[Timestamp] = None) -> None:
    get_watchdog().touch(path, mtime)


def watch_asset(asset_path: PathLike, callback: Optional[Callback]) -> bool:
    return get_watchdog().watch_asset(asset_path, callback)


def unwatch_asset(asset_path: PathLike) -> bool:
    return get_watchdog().unwatch_asset(asset_path)


def touch_asset(asset_path: PathLike, mtime: Optional[Timestamp] = None) -> None:
    get_watchdog().touch_asset(asset_path, mtime)
