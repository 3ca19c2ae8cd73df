"""Clock and TickContext for the elapsed-time driver."""
from __future__ import annotations

import random as _random
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    random: _random.Random


class Clock:
    """Measures real elapsed time between ticks.

    Ticks use the actual time since the previous tick, not the nominal
    period, so late or skipped timer callbacks are absorbed.
    """

    def __init__(
        self, interval: float = 0.1, time_fn: Callable[[], float] = time.monotonic
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._time_fn = time_fn
        self._last = time_fn()
        self._tick_number = 0
        self._elapsed = 0.0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def now(self) -> float:
        return self._time_fn()

    def measure(self) -> float:
        """Seconds since the previous measurement (never negative)."""
        current = self._time_fn()
        dt = max(0.0, current - self._last)
        self._last = current
        return dt

    def advance(self, dt: float) -> int:
        self._tick_number += 1
        self._elapsed += dt
        return self._tick_number

    def context(self, dt: float, rng: _random.Random) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=dt,
            elapsed=self._elapsed,
            random=rng,
        )
