"""Pacing strategies applied between processed highlights."""

import time
from typing import Callable, Protocol


class RateLimiter(Protocol):
    """Anything the engine can call once per processed highlight."""

    def wait(self) -> None: ...


class FixedDelayLimiter:
    """Sleeps for the same fixed amount after every highlight."""

    def __init__(self, delay_seconds: float = 0.15, sleep: Callable[[float], None] = time.sleep):
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def wait(self) -> None:
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
