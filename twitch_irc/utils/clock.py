"""Millisecond time source used for rate limiting and message stamps."""

from __future__ import annotations

import time
from collections.abc import Callable

Clock = Callable[[], int]


def monotonic_millis() -> int:
    """Milliseconds from a monotonic clock; unaffected by wall clock changes."""
    return time.monotonic_ns() // 1_000_000


__all__ = ["Clock", "monotonic_millis"]
