"""Dispatchers that decide which thread runs a watch callback."""

import logging
import queue
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def run_inline(thunk: Callable[[], None]) -> None:
    """Run the callback immediately on the calling (polling) thread."""
    thunk()


class MainThreadDispatcher:
    """
    Queues callbacks for a host thread to run later.

    Polling threads hand thunks to the dispatcher and move on without
    waiting. The host's main loop calls process_pending() to run them.
    Nothing is coalesced, so a file that changes on every tick queues one
    callback per tick.
    """

    def __init__(self):
        self._queue: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def __call__(self, thunk: Callable[[], None]) -> None:
        self._queue.put(thunk)

    def process_pending(self, limit: Optional[int] = None) -> int:
        """
        Run queued callbacks on the calling thread.

        Args:
            limit: Maximum number of callbacks to run, None for all queued

        Returns:
            Number of callbacks run
        """
        count = 0
        while limit is None or count < limit:
            try:
                thunk = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                thunk()
            except Exception:
                logger.exception("Dispatched watch callback failed")
            count += 1
        return count

    def __len__(self) -> int:
        """Return the number of callbacks waiting to run."""
        return self._queue.qsize()
