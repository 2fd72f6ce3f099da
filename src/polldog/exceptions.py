"""Custom exceptions for the polldog package."""

from pathlib import Path


class WatchdogError(Exception):
    """Base exception for all polldog errors."""
    pass


class WatchNotFoundError(WatchdogError):
    """Watched path, or every entry matching its wildcard, does not exist."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Failed to find file or directory at: {path}")


class InvalidPatternError(WatchdogError):
    """Wildcard is misplaced or repeated in a watched path."""
    pass


class MetadataUnavailableError(WatchdogError):
    """A path expected to exist could not be stat'ed."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Failed to read modification time of: {path}")
