"""Millisecond wall-clock helpers shared by the persisted collections."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current Unix time in whole milliseconds."""
    return int(time.time() * 1000)


__all__ = ["Clock", "now_ms"]
