"""A single watch and the thread that polls it."""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.utils import BaseThread

from .dispatch import run_inline
from .exceptions import MetadataUnavailableError, WatchdogError, WatchNotFoundError
from .models import Callback, Dispatcher, WatchState
from .pattern import PathPattern
from .tracker import ChangeTracker

logger = logging.getLogger(__name__)

# Receives the failing watch and the error raised during one of its ticks
ErrorHandler = Callable[["Watch", WatchdogError], None]


def log_error(watch: "Watch", error: WatchdogError) -> None:
    """Default handler for errors raised inside a polling thread."""
    logger.error(f"Watch on {watch.key} failed: {error}")


class Watch(BaseThread):
    """
    One registered path and the daemon thread that polls it.

    Each watch owns a private ChangeTracker, so ticks never need a lock.
    For a wildcard pattern the matching entries are seeded at construction
    and the callback is announced once with the pattern path, letting the
    caller act on the initial state. A plain path is not seeded: its first
    tick reports the path as changed.
    """

    def __init__(
        self,
        key: str,
        pattern: PathPattern,
        callback: Optional[Callback],
        poll_interval: float = 0.5,
        dispatcher: Optional[Dispatcher] = None,
        on_error: Optional[ErrorHandler] = None,
        announce: bool = True,
    ):
        """
        Initialize the watch.

        Args:
            key: Path string the watch was registered under
            pattern: Parsed directory and optional pattern
            callback: Called with the changed path
            poll_interval: Seconds to wait between two ticks
            dispatcher: Runs callbacks, defaults to the polling thread
            on_error: Receives errors raised during a tick
            announce: Announce a wildcard watch at once. When False the owner
                calls announce() itself, e.g. after releasing a lock

        Raises:
            WatchNotFoundError: If a wildcard directory cannot be listed
        """
        super().__init__()
        self.name = f"polldog:{key}"
        self.key = key
        self.pattern = pattern
        self.callback = callback
        self.tracker = ChangeTracker()
        self.poll_interval = poll_interval
        self._dispatch = dispatcher if dispatcher is not None else run_inline
        self._on_error = on_error if on_error is not None else log_error
        self._state = WatchState.CREATED

        if pattern.has_wildcard:
            try:
                entries = list(pattern.matching_entries())
            except OSError as e:
                raise WatchNotFoundError(key) from e
            for entry in entries:
                try:
                    self.tracker.check(entry)
                except MetadataUnavailableError:
                    logger.debug(f"Entry vanished while seeding {key}: {entry}")
            if announce:
                self.announce()

    def announce(self) -> None:
        """Fire the callback once with the pattern path of a wildcard watch."""
        if self.pattern.has_wildcard and self.callback is not None:
            self._fire(self.pattern.target)

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def running(self) -> bool:
        """Whether the polling thread is alive and has not been told to stop."""
        return self._state is WatchState.RUNNING and self.should_keep_running()

    def on_thread_start(self) -> None:
        self._state = WatchState.RUNNING

    def run(self) -> None:
        try:
            while self.should_keep_running():
                try:
                    self.poll()
                except MetadataUnavailableError as e:
                    # The watched target is gone; stop instead of failing every tick
                    self._on_error(self, e)
                    break
                if self.stopped_event.wait(self.poll_interval):
                    break
        finally:
            self._state = WatchState.STOPPED
            logger.debug(f"Polling stopped for {self.key}")

    def poll(self) -> bool:
        """
        Run a single check.

        For a wildcard watch, the first matching entry found to have changed
        fires the callback with the pattern path and ends the tick. Entries
        after it are checked on the next tick.

        Returns:
            True if the callback was dispatched

        Raises:
            MetadataUnavailableError: If the watched path or directory is gone
        """
        if not self.pattern.has_wildcard:
            if self.tracker.check(self.pattern.directory) and self.callback is not None:
                self._fire(self.pattern.directory)
                return True
            return False

        try:
            entries = list(self.pattern.matching_entries())
        except OSError as e:
            raise MetadataUnavailableError(self.pattern.directory) from e

        for entry in entries:
            try:
                changed = self.tracker.check(entry)
            except MetadataUnavailableError as e:
                self.tracker.forget(entry)
                self._on_error(self, e)
                continue
            if changed and self.callback is not None:
                self._fire(self.pattern.target)
                return True
        return False

    def stop(self) -> None:
        """
        Signal the polling thread to stop and wait for it to exit.

        From a polling thread, such as inside this or another watch's
        callback, this only sets the flag and the thread exits on its own.
        Two watches whose callbacks unwatch each other would otherwise join
        each other forever.
        """
        super().stop()
        if isinstance(threading.current_thread(), Watch):
            return
        if self.is_alive():
            self.join()
        self._state = WatchState.STOPPED

    def _fire(self, path: Path) -> None:
        callback = self.callback
        key = self.key

        def thunk():
            try:
                callback(path)
            except Exception:
                logger.exception(f"Callback for {key} failed")

        logger.debug(f"Change detected for {key}")
        self._dispatch(thunk)

    def __repr__(self) -> str:
        return f"<Watch {self.key!r} {self._state.value}>"
