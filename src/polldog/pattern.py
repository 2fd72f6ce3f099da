"""Parsing and matching of watched paths with an optional wildcard."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

from .exceptions import InvalidPatternError

WILDCARD = "*"


@dataclass(frozen=True)
class PathPattern:
    """
    A watched path split into a fixed directory and an optional filename pattern.

    A pattern holds exactly one wildcard, ``prefix*suffix``. Matching is
    substring containment: a name matches when it contains the prefix and
    contains the suffix, anywhere, so ``xprefixysuffixz`` matches
    ``prefix*suffix``.

    Attributes:
        directory: Directory holding the pattern, or the watched path itself
        pattern: Last path segment when it holds the wildcard, else ""
        prefix: Text before the wildcard
        suffix: Text after the wildcard
    """
    directory: Path
    pattern: str = ""
    prefix: str = ""
    suffix: str = ""

    @classmethod
    def parse(cls, path: Union[str, os.PathLike]) -> "PathPattern":
        """
        Split a path into directory and pattern.

        Args:
            path: Path that may hold a wildcard in its last segment

        Returns:
            The parsed pattern

        Raises:
            InvalidPatternError: If the wildcard is outside the last segment
                or appears more than once
        """
        raw = os.fspath(path)
        if WILDCARD not in raw:
            return cls(directory=Path(raw))

        full = Path(raw)
        name = full.name
        if WILDCARD in str(full.parent):
            raise InvalidPatternError(f"Wildcard is only allowed in the last path segment: {raw}")
        if name.count(WILDCARD) > 1:
            raise InvalidPatternError(f"Only one wildcard is allowed per pattern: {raw}")

        prefix, _, suffix = name.partition(WILDCARD)
        return cls(directory=full.parent, pattern=name, prefix=prefix, suffix=suffix)

    @property
    def has_wildcard(self) -> bool:
        return bool(self.pattern)

    @property
    def target(self) -> Path:
        """The path reported to callbacks: directory joined with the pattern."""
        if not self.pattern:
            return self.directory
        return self.directory / self.pattern

    def matches(self, name: str) -> bool:
        """Check a bare filename against the pattern."""
        if not self.pattern:
            return False
        return (not self.prefix or self.prefix in name) and (not self.suffix or self.suffix in name)

    def matching_entries(self) -> Iterator[Path]:
        """
        Yield the directory entries whose name matches the pattern.

        Raises:
            OSError: If the directory cannot be listed
        """
        with os.scandir(self.directory) as it:
            for entry in it:
                if self.matches(entry.name):
                    yield Path(entry.path)

    def __str__(self) -> str:
        return str(self.target)
