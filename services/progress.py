"""
Rate limiting for progress callbacks.

A fast digest loop can produce thousands of chunk updates per second; the
throttle lets through at most one sample per interval so a slow consumer
(a terminal progress bar, a log handler) is never flooded.
"""
import time
from typing import Callable, Optional

# Reference interval between progress samples, in seconds.
DEFAULT_PROGRESS_INTERVAL = 0.1


class ProgressThrottle:
    """
    Decides whether a progress sample may be emitted now.

    The first offer always passes. Later offers pass once at least ``interval``
    seconds have elapsed since the last emission. ``force=True`` always passes
    and is used for final samples.
    """

    def __init__(self, interval: float = DEFAULT_PROGRESS_INTERVAL, clock: Callable[[], float] = time.monotonic):
        if interval < 0:
            raise ValueError("Progress interval must be non-negative")
        self.interval = interval
        self.clock = clock
        self._last_emit: Optional[float] = None

    def should_emit(self, force: bool = False) -> bool:
        now = self.clock()
        if force or self._last_emit is None or now - self._last_emit >= self.interval:
            self._last_emit = now
            return True
        return False
