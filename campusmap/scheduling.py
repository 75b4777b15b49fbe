"""
Cooperative timers.

Only the chat reply is deferred. Nothing awaits a scheduled callback;
callbacks run later on the same thread as everything else.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        ...


class ManualScheduler:
    """
    Deterministic scheduler driven by `advance()`.
    
    Callbacks due at the same time run in the order they were scheduled.
    """
    
    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._sequence = itertools.count()
    
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        heapq.heappush(self._queue, (self.now + delay, next(self._sequence), callback))
    
    @property
    def pending(self) -> int:
        return len(self._queue)
    
    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback now due."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = target
        return ran


class AsyncioScheduler:
    """Schedules on an asyncio event loop (the running loop by default)."""
    
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
    
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(delay, callback)
