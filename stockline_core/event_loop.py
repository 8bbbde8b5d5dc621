from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import itertools
import logging
import time
from typing import Callable, Protocol

from .events import InputEvent


LOGGER = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> float:
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


@dataclass
class ManualClock:
    """Clock advanced explicitly by the caller. Used for deterministic replay."""

    current: float = 0.0

    def now(self) -> float:
        return self.current

    def set(self, value: float) -> None:
        if value < self.current:
            raise ValueError("clock cannot move backwards")
        self.current = float(value)


@dataclass(eq=False)
class DelayedTask:
    due_at: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


@dataclass(order=True)
class _QueueEntry:
    due_at: float
    seq: int
    task: DelayedTask = field(compare=False)


class EventLoop:
    """Single-threaded queue that delivers pointer events and delayed tasks in time order.

    Tasks due at or before an event's timestamp always run before that event is
    delivered, so timer callbacks and pointer events never race.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or MonotonicClock()
        self._heap: list[_QueueEntry] = []
        self._seq = itertools.count()
        self._handler: Callable[[InputEvent], bool] | None = None

    @property
    def clock(self) -> Clock:
        return self._clock

    def now(self) -> float:
        return self._clock.now()

    def set_handler(self, handler: Callable[[InputEvent], bool] | None) -> None:
        self._handler = handler

    def post_delayed(self, delay_s: float, callback: Callable[[], None]) -> DelayedTask:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        task = DelayedTask(due_at=self.now() + float(delay_s), callback=callback)
        heapq.heappush(self._heap, _QueueEntry(due_at=task.due_at, seq=next(self._seq), task=task))
        return task

    def pending_count(self) -> int:
        return sum(1 for entry in self._heap if entry.task.pending)

    def run_due(self, now: float | None = None) -> int:
        """Run every pending task due at or before `now`. Returns the number run."""
        limit = self.now() if now is None else float(now)
        ran = 0
        while self._heap and self._heap[0].due_at <= limit:
            entry = heapq.heappop(self._heap)
            task = entry.task
            if not task.pending:
                continue
            task.fired = True
            task.callback()
            ran += 1
        return ran

    def advance_to(self, timestamp: float) -> int:
        """Advance a manual clock to `timestamp`, running due tasks at their due times."""
        if not isinstance(self._clock, ManualClock):
            raise TypeError("advance_to requires a ManualClock")
        ran = 0
        while self._heap and self._heap[0].due_at <= timestamp:
            due = self._heap[0].due_at
            if due > self._clock.current:
                self._clock.set(due)
            ran += self.run_due(due)
        self._clock.set(max(self._clock.current, float(timestamp)))
        return ran

    def dispatch(self, event: InputEvent) -> bool:
        if isinstance(self._clock, ManualClock):
            self.advance_to(event.timestamp)
        else:
            self.run_due(event.timestamp)
        if self._handler is None:
            LOGGER.debug("dropping %s: no handler registered", event.event_type)
            return False
        return bool(self._handler(event))
