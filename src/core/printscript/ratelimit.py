"""Fixed-window request quota keyed by client identifier."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(slots=True, frozen=True)
class RateDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float

    @property
    def retry_after(self) -> int:
        return max(1, math.ceil(self.reset_after))


@dataclass(slots=True)
class _Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_s: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_s <= 0:
            raise ValueError("window_s must be positive")
        self._max = max_requests
        self._window = window_s
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max

    def hit(self, key: str) -> RateDecision:
        now = self._clock()
        with self._lock:
            self._prune(now)
            window = self._windows.get(key)
            if window is None:
                window = self._windows[key] = _Window(started_at=now, count=0)
            reset_after = window.started_at + self._window - now
            if window.count >= self._max:
                return RateDecision(False, self._max, 0, reset_after)
            window.count += 1
            return RateDecision(True, self._max, self._max - window.count, reset_after)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now - window.started_at >= self._window]
        for key in expired:
            del self._windows[key]


__all__ = ["FixedWindowRateLimiter", "RateDecision"]
