"""
Virtual clock and timer scheduler

Time is game time in milliseconds and only moves when advance() is called,
so periodic behavior can be driven frame by frame or fast-forwarded in tests.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Tuple


class TimerEvent:
    """Handle for a scheduled callback"""

    def __init__(self, delay: float, callback: Callable[[], None], loop: bool, deadline: float):
        self.delay = delay
        self.callback = callback
        self.loop = loop
        self.deadline = deadline
        self.destroyed = False
        self.has_dispatched = False  # one-shot events only

    def destroy(self):
        self.destroyed = True

    @property
    def pending(self) -> bool:
        return not self.destroyed and not self.has_dispatched


class Scheduler:
    """Min-heap of deadlines over a virtual clock"""

    def __init__(self, now: float = 0.0):
        self.now = float(now)
        self._heap: List[Tuple[float, int, TimerEvent]] = []
        self._seq = itertools.count()
        self._events: List[TimerEvent] = []

    def add_event(self, delay: float, callback: Callable[[], None], loop: bool = False) -> TimerEvent:
        if delay <= 0 and loop:
            raise ValueError("Looping timers need a positive delay")
        event = TimerEvent(delay, callback, loop, self.now + delay)
        self._push(event)
        self._events.append(event)
        return event

    def delayed_call(self, delay: float, callback: Callable[[], None]) -> TimerEvent:
        return self.add_event(delay, callback, loop=False)

    def advance(self, dt: float):
        """Move the clock forward by dt ms, firing due events in deadline order"""
        target = self.now + dt
        while self._heap and self._heap[0][0] <= target:
            deadline, _, event = heapq.heappop(self._heap)
            if event.destroyed:
                continue
            self.now = deadline
            if event.loop:
                event.deadline = deadline + event.delay
                self._push(event)
            else:
                event.has_dispatched = True
            event.callback()
        self.now = target
        self._events = [e for e in self._events if e.pending]

    def shutdown(self):
        """Destroy every event still waiting to fire"""
        for event in self._events:
            event.destroy()
        self._events = []
        self._heap = []

    @property
    def pending_count(self) -> int:
        return sum(1 for e in self._events if e.pending)

    def _push(self, event: TimerEvent):
        heapq.heappush(self._heap, (event.deadline, next(self._seq), event))
