from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple


Callback = Callable[[], None]


class TimerHandle:
    """A scheduled callback. Call `cancel()` to drop it."""

    __slots__ = ("when", "interval", "callback", "cancelled")

    def __init__(self, when: float, callback: Callback, interval: Optional[float] = None) -> None:
        self.when = when
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Cooperative virtual clock, in milliseconds.

    Nothing runs on its own: the owner calls `advance()` from its loop (the
    pygame front-end feeds it frame deltas, tests feed it by hand). Due
    callbacks run in time order, ties in the order they were scheduled.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def _push(self, handle: TimerHandle) -> TimerHandle:
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        return self._push(TimerHandle(self.now + delay_ms, callback))

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        return self._push(TimerHandle(self.now + interval_ms, callback, interval_ms))

    def advance(self, ms: float) -> int:
        """Move the clock forward by `ms` and run whatever falls due. Returns callbacks run."""
        target = self.now + max(0.0, ms)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            if handle.interval is not None:
                handle.when = when + handle.interval
                self._push(handle)
            handle.callback()
            ran += 1
        self.now = target
        return ran
