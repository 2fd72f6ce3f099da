#!/usr/bin/env python3
"""
Polling watcher demo.

This example demonstrates:
1. Watching a single file and a wildcard pattern
2. Running callbacks on the main thread through MainThreadDispatcher
3. Forcing a reload with touch()

Usage:
    python examples/watch_demo.py

The demo will:
- Create a temporary directory with a few files
- Watch one file and a ``*.glsl`` pattern
- Modify files and touch them
- Print every callback from the main loop
- Unwatch everything after a few seconds
"""

import logging
import sys
import tempfile
import time
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from polldog import MainThreadDispatcher, Watchdog, WatchdogConfig


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def main():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        settings = root / "settings.json"
        settings.write_text("{}")
        (root / "blur.glsl").write_text("// blur")
        (root / "bloom.glsl").write_text("// bloom")

        dispatcher = MainThreadDispatcher()
        config = WatchdogConfig(poll_interval_ms=200, enabled=True)

        with Watchdog(config, dispatcher=dispatcher) as wd:
            wd.watch(settings, lambda p: print(f"[MAIN] settings changed: {p.name}"))
            wd.watch(root / "*.glsl", lambda p: print(f"[MAIN] shaders changed: {p}"))

            print(f"[MAIN] Watching {len(wd)} path(s)")

            steps = [
                (1.0, lambda: settings.write_text('{"vsync": true}')),
                (2.0, lambda: (root / "blur.glsl").write_text("// blur v2")),
                (3.0, lambda: wd.touch(root / "bloom.glsl", time.time() + 1)),
            ]

            started = time.monotonic()
            while time.monotonic() - started < 4.0:
                elapsed = time.monotonic() - started
                while steps and elapsed >= steps[0][0]:
                    steps.pop(0)[1]()
                dispatcher.process_pending()
                time.sleep(0.05)

            print(f"[MAIN] Stopped {wd.unwatch_all()} watch(es)")


if __name__ == "__main__":
    main()
