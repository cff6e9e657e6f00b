"""Wall-clock helpers (epoch milliseconds)."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]


def epoch_ms() -> int:
    """Current time in integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def elapsed_ms(clock: Clock, started: int) -> int:
    """Milliseconds since ``started``; never negative if the wall clock steps back."""
    return max(0, clock() - started)


__all__ = ["Clock", "epoch_ms", "elapsed_ms"]
