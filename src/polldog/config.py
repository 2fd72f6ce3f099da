"""Configuration for the polldog package."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class WatchdogConfig:
    """
    Configuration options for the watchdog.
    
    Attributes:
        poll_interval_ms: Milliseconds between two checks of the same watch
        enabled: Selects the live polling engine (True) or the stub (False).
            None defers to POLLDOG_ENABLED, then to ``__debug__`` so that
            optimized interpreters get the stub.
        asset_root: Directory that relative asset paths are resolved against
    """
    poll_interval_ms: int = 500
    enabled: Optional[bool] = None
    asset_root: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.asset_root, str):
            self.asset_root = Path(self.asset_root)
        if self.poll_interval_ms <= 0:
            raise ValueError(f"poll_interval_ms must be positive: {self.poll_interval_ms}")

    @property
    def poll_interval(self) -> float:
        """Polling interval in seconds."""
        return self.poll_interval_ms / 1000.0

    def is_enabled(self) -> bool:
        """Whether the live polling engine should be used."""
        if self.enabled is not None:
            return self.enabled
        env = os.environ.get("POLLDOG_ENABLED")
        if env is not None:
            return env.strip().lower() in _TRUTHY
        return __debug__

    def get_asset_root(self) -> Path:
        """Get the asset root from config or environment."""
        if self.asset_root is not None:
            return self.asset_root
        env = os.environ.get("POLLDOG_ASSET_ROOT")
        if env:
            return Path(env)
        return Path.cwd() / "assets"

    @classmethod
    def from_env(cls) -> "WatchdogConfig":
        """Create a config with the polling interval taken from the environment."""
        interval = os.environ.get("POLLDOG_POLL_INTERVAL_MS")
        if interval:
            return cls(poll_interval_ms=int(interval))
        return cls()
