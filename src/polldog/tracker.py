"""Modification-time bookkeeping for a single watch."""

import os
from pathlib import Path
from typing import Dict, Union

from .exceptions import MetadataUnavailableError


class ChangeTracker:
    """
    Remembers the last modification time seen for each path.

    Not thread-safe: a tracker belongs to one watch and is only touched by
    that watch's polling thread.
    """

    def __init__(self):
        self._mtimes: Dict[str, int] = {}

    def check(self, path: Union[str, Path]) -> bool:
        """
        Check whether a path changed since it was last checked.

        The first check of a path always reports a change. Afterwards only
        a strictly newer modification time does, and only then is the stored
        time replaced.

        Args:
            path: Path to stat

        Returns:
            True if the path is new or was modified

        Raises:
            MetadataUnavailableError: If the path cannot be stat'ed
        """
        key = str(path)
        try:
            mtime = os.stat(key).st_mtime_ns
        except OSError as e:
            raise MetadataUnavailableError(path) from e

        previous = self._mtimes.get(key)
        if previous is None or previous < mtime:
            self._mtimes[key] = mtime
            return True
        return False

    def forget(self, path: Union[str, Path]) -> bool:
        """
        Drop the record for a path.

        Returns:
            True if a record was removed
        """
        return self._mtimes.pop(str(path), None) is not None

    def __contains__(self, path) -> bool:
        return str(path) in self._mtimes

    def __len__(self) -> int:
        return len(self._mtimes)
