from __future__ import annotations

import time


def now_millis() -> int:
    """Current UTC time as milliseconds since the epoch.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return int(time.time() * 1000)
