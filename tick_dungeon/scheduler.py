"""DeferredScheduler - single-threaded queue of delayed actions."""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class DeferredTask:
    """One scheduled action. Ordered by due time, then scheduling order."""

    due: float
    seq: int
    name: str = field(compare=False)
    action: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class DeferredScheduler:
    """Runs delayed actions one at a time, each to completion.

    Time is supplied by the caller through :meth:`advance`; nothing here
    reads a clock or starts a thread.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._heap: list[DeferredTask] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def schedule(self, delay: float, name: str, action: Callable[[], None]) -> DeferredTask:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        task = DeferredTask(self._now + delay, next(self._seq), name, action)
        heapq.heappush(self._heap, task)
        return task

    def cancel(self, task: DeferredTask) -> None:
        task.cancelled = True

    def cancel_all(self) -> int:
        """Drop every pending task. Returns how many were dropped."""
        dropped = sum(1 for task in self._heap if not task.cancelled)
        self._heap.clear()
        return dropped

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        self._now += dt

    def run_due(self) -> int:
        """Run every task due at or before the current time, in order.

        A task scheduled by a running task runs in this call too if it is
        already due. Returns how many tasks ran.
        """
        ran = 0
        while self._heap and self._heap[0].due <= self._now:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            task.action()
            ran += 1
        return ran

    def pending(self) -> list[DeferredTask]:
        return sorted(task for task in self._heap if not task.cancelled)

    def __len__(self) -> int:
        return sum(1 for task in self._heap if not task.cancelled)
