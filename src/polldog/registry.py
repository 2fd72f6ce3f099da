"""Thread-safe registry of watched paths."""

import logging
import os
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .config import WatchdogConfig
from .dispatch import run_inline
from .exceptions import WatchNotFoundError
from .models import Callback, Dispatcher
from .pattern import PathPattern
from .watcher import ErrorHandler, Watch, log_error

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
Timestamp = Union[float, datetime]


def set_mtime(path: PathLike, mtime: Optional[Timestamp] = None) -> None:
    """
    Set the modification time of a file or directory, keeping its access time.

    Args:
        path: Path to touch
        mtime: New modification time, defaults to now

    Raises:
        WatchNotFoundError: If the path does not exist
    """
    if mtime is None:
        mtime = time.time()
    elif isinstance(mtime, datetime):
        mtime = mtime.timestamp()

    try:
        st = os.stat(path)
        os.utime(path, (st.st_atime, mtime))
    except FileNotFoundError as e:
        raise WatchNotFoundError(path) from e


class Watchdog:
    """
    Registry of active watches, keyed by the path string given to watch().

    Every watch polls on its own thread. The registry lock guards the
    mapping only. Watches are built and announced outside it, and stopped
    after they have been removed from it, so a slow callback never holds
    up registration of other paths. Unwatching from inside a polling
    thread does not wait for the stopped watch to exit.
    """

    def __init__(
        self,
        config: Optional[WatchdogConfig] = None,
        dispatcher: Optional[Dispatcher] = None,
        on_error: Optional[ErrorHandler] = None,
        asset_resolver: Optional[Callable[[Path], Path]] = None,
    ):
        """
        Initialize the registry.

        Args:
            config: Watchdog configuration
            dispatcher: Runs callbacks, defaults to running them on the polling thread
            on_error: Receives errors raised inside polling threads
            asset_resolver: Maps a relative asset path to an absolute one
        """
        self.config = config if config is not None else WatchdogConfig()
        self.dispatcher = dispatcher if dispatcher is not None else run_inline
        self.on_error = on_error if on_error is not None else log_error
        self._asset_resolver = asset_resolver
        self._watches: Dict[str, Watch] = {}
        self._lock = threading.RLock()

    def watch(self, path: PathLike, callback: Optional[Callback]) -> bool:
        """
        Start watching a file, a directory or a wildcard pattern.

        Passing callback=None unwatches the path, or every path when the
        path is empty.

        Args:
            path: Path to watch, optionally ending in a ``prefix*suffix`` segment
            callback: Called with the changed path

        Returns:
            True if a new watch was started, False if the path was already watched

        Raises:
            WatchNotFoundError: If the path, or every match of its pattern, is missing
            InvalidPatternError: If the wildcard is misplaced
        """
        key = os.fspath(path)
        if callback is None:
            if not key:
                self.unwatch_all()
            else:
                self.unwatch(key)
            return False

        pattern = PathPattern.parse(key)
        self._validate(key, pattern)

        if self.is_watching(key):
            logger.debug(f"Already watching {key}")
            return False

        watch = Watch(
            key,
            pattern,
            callback,
            poll_interval=self.config.poll_interval,
            dispatcher=self.dispatcher,
            on_error=self.on_error,
            announce=False,
        )

        with self._lock:
            stale = self._watches.get(key)
            if stale is not None and stale.running:
                # Another thread registered the key while this watch was built
                logger.debug(f"Already watching {key}")
                return False
            watch.start()
            self._watches[key] = watch

        if stale is not None:
            # A watch that stopped itself after losing its target
            stale.stop()
        watch.announce()
        logger.info(f"Watching {key}")
        return True

    def _validate(self, key: str, pattern: PathPattern) -> None:
        if not pattern.has_wildcard:
            if not os.path.exists(pattern.directory):
                raise WatchNotFoundError(key)
            return

        try:
            found = any(True for _ in pattern.matching_entries())
        except OSError as e:
            raise WatchNotFoundError(key) from e
        if not found:
            raise WatchNotFoundError(key)

    def unwatch(self, path: PathLike) -> bool:
        """
        Stop watching a path and wait for its polling thread to exit.

        Called from a polling thread, the watch is removed and signalled
        but not waited for.

        Returns:
            True if the path was watched, False otherwise
        """
        key = os.fspath(path)
        with self._lock:
            watch = self._watches.pop(key, None)
        if watch is None:
            return False

        watch.stop()
        logger.info(f"Stopped watching {key}")
        return True

    def unwatch_all(self) -> int:
        """
        Stop all watches and wait for their polling threads to exit.

        Returns:
            Number of watches removed
        """
        with self._lock:
            watches = list(self._watches.values())
            self._watches.clear()

        for watch in watches:
            watch.stopped_event.set()
        for watch in watches:
            watch.stop()

        if watches:
            logger.info(f"Stopped {len(watches)} watch(es)")
        return len(watches)

    def touch(self, path: PathLike, mtime: Optional[Timestamp] = None) -> None:
        """Set a path's modification time so the watches depending on it fire."""
        set_mtime(path, mtime)

    def resolve_asset(self, asset_path: PathLike) -> Path:
        """Prefix a relative asset path with the asset root."""
        if self._asset_resolver is not None:
            return self._asset_resolver(Path(asset_path))
        return self.config.get_asset_root() / asset_path

    def watch_asset(self, asset_path: PathLike, callback: Optional[Callback]) -> bool:
        return self.watch(self.resolve_asset(asset_path), callback)

    def unwatch_asset(self, asset_path: PathLike) -> bool:
        return self.unwatch(self.resolve_asset(asset_path))

    def touch_asset(self, asset_path: PathLike, mtime: Optional[Timestamp] = None) -> None:
        set_mtime(self.resolve_asset(asset_path), mtime)

    def get_watch(self, path: PathLike) -> Optional[Watch]:
        with self._lock:
            return self._watches.get(os.fspath(path))

    def is_watching(self, path: PathLike) -> bool:
        """
        Check if a path has a watch that is still polling.

        A watch that stopped after losing its target stays registered
        until it is unwatched, but is not reported here.
        """
        watch = self.get_watch(path)
        return watch is not None and watch.running

    def get_watched_paths(self) -> List[str]:
        """
        Get the keys of all registered watches.

        Returns:
            List of path strings as given to watch()
        """
        with self._lock:
            return list(self._watches.keys())

    def close(self) -> None:
        self.unwatch_all()

    def __enter__(self) -> "Watchdog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        """Return the number of registered watches."""
        with self._lock:
            return len(self._watches)

    def __contains__(self, path: PathLike) -> bool:
        with self._lock:
            return os.fspath(path) in self._watches


class SleepyWatchdog:
    """
    Stand-in for Watchdog that never polls.

    watch() runs the callback once, synchronously, with the given path and
    keeps no state. The unwatch methods do nothing. Touching still writes
    the modification time, since it does not involve the registry.
    """

    def __init__(
        self,
        config: Optional[WatchdogConfig] = None,
        dispatcher: Optional[Dispatcher] = None,
        on_error: Optional[ErrorHandler] = None,
        asset_resolver: Optional[Callable[[Path], Path]] = None,
    ):
        # dispatcher and on_error are accepted to match Watchdog and unused:
        # callbacks run inline and nothing polls, so nothing can fail later
        del dispatcher, on_error
        self.config = config if config is not None else WatchdogConfig()
        self._asset_resolver = asset_resolver

    def watch(self, path: PathLike, callback: Optional[Callback]) -> bool:
        if callback is not None:
            callback(Path(path))
        return False

    def unwatch(self, path: PathLike) -> bool:
        return False

    def unwatch_all(self) -> int:
        return 0

    def touch(self, path: PathLike, mtime: Optional[Timestamp] = None) -> None:
        set_mtime(path, mtime)

    def resolve_asset(self, asset_path: PathLike) -> Path:
        if self._asset_resolver is not None:
            return self._asset_resolver(Path(asset_path))
        return self.config.get_asset_root() / asset_path

    def watch_asset(self, asset_path: PathLike, callback: Optional[Callback]) -> bool:
        # The asset path is handed over unresolved
        return self.watch(asset_path, callback)

    def unwatch_asset(self, asset_path: PathLike) -> bool:
        return False

    def touch_asset(self, asset_path: PathLike, mtime: Optional[Timestamp] = None) -> None:
        set_mtime(self.resolve_asset(asset_path), mtime)

    def get_watch(self, path: PathLike) -> None:
        return None

    def is_watching(self, path: PathLike) -> bool:
        return False

    def get_watched_paths(self) -> List[str]:
        return []

    def close(self) -> None:
        pass

    def __enter__(self) -> "SleepyWatchdog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return 0

    def __contains__(self, path: PathLike) -> bool:
        return False
