"""Capped narrative log with immediate subscriber dispatch."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class Event:
    time: float
    type: str
    message: str
    data: dict[str, Any]


_Handler = Callable[[Event], None]


class EventLog:
    """Retains the most recent *max_entries* events and notifies subscribers.

    Subscribers are a one-way sink: they receive every event as it is
    emitted, whether or not it is still retained.
    """

    def __init__(self, max_entries: int = 10) -> None:
        self._max = max_entries
        maxlen = max_entries if max_entries > 0 else None
        self._events: deque[Event] = deque(maxlen=maxlen)
        self._subscribers: list[_Handler] = []

    def subscribe(self, handler: _Handler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: _Handler) -> None:
        try:
            self._subscribers.remove(handler)
        except ValueError:
            pass

    def emit(self, time: float, type: str, message: str, /, **data: Any) -> Event:
        event = Event(time=time, type=type, message=message, data=data)
        self._events.append(event)
        logger.info("[%.1fs] %s", time, message)
        for handler in list(self._subscribers):
            handler(event)
        return event

    def query(self, type: str | None = None) -> list[Event]:
        result: list[Event] = list(self._events)
        if type is not None:
            result = [e for e in result if e.type == type]
        return result

    def last(self, type: str) -> Event | None:
        for e in reversed(self._events):
            if e.type == type:
                return e
        return None

    def messages(self) -> list[str]:
        return [e.message for e in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
