"""루프 주기 측정 유틸리티."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Optional


class FpsTimer:
    def __init__(self, window: int = 10, clock: Callable[[], float] = time.perf_counter) -> None:
        self.window = window
        self.clock = clock
        self._timestamps: Deque[float] = deque(maxlen=window)

    def lap(self) -> Optional[float]:
        now = self.clock()
        self._timestamps.append(now)
        if len(self._timestamps) < 2:
            return None
        elapsed = now - self._timestamps[0]
        return (len(self._timestamps) - 1) / elapsed if elapsed > 0 else None


class LoopClock:
    """직전 tick 이후 경과 시간(dt)을 단조 시계로 잰다.

    첫 tick은 이전 시각이 없으므로 initial_dt(공칭 주기)를 돌려준다. 미지정이면 None.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, initial_dt: Optional[float] = None) -> None:
        self.clock = clock
        self.initial_dt = initial_dt
        self._last: Optional[float] = None

    def tick(self) -> Optional[float]:
        now = self.clock()
        dt = self.initial_dt if self._last is None else now - self._last
        self._last = now
        return dt

    def reset(self) -> None:
        self._last = None
