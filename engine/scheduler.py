"""
scheduler.py — Deferred Callbacks for Auto-Advance
==================================================
The playback controller never sleeps.  While playing it asks a Scheduler
to call it back after the inter-step delay and yields control; pause or
reset simply cancel the pending callback (and the controller re-checks its
own state when a callback fires anyway).

Two implementations:
  • ManualScheduler  – callbacks fire when the host calls run_due() / advance().
                       The web app ticks it on every browser poll; tests drive
                       a virtual clock with advance().
  • AsyncioScheduler – thin wrapper over loop.call_later for asyncio hosts.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Arrange for callback() after `delay` seconds; return a cancel handle."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Prevent a pending callback from firing.  Unknown / fired handles are ignored."""


# ---------------------------------------------------------------------------
# Manual (tick-driven) scheduler
# ---------------------------------------------------------------------------
@dataclass(order=True)
class _Timer:
    due:       float
    seq:       int
    callback:  Callable[[], None] = field(compare=False)
    cancelled: bool               = field(default=False, compare=False)


class ManualScheduler(Scheduler):
    """
    Attributes:
        clock : Optional time source (e.g. time.monotonic).  Without one the
                scheduler runs on a virtual clock that only advance() moves.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock
        self._now = 0.0
        self._timers: List[_Timer] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock() if self._clock is not None else self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Timer:
        timer = _Timer(self.now() + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    def cancel(self, handle: Any) -> None:
        if isinstance(handle, _Timer):
            handle.cancelled = True

    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every callback due at `now` (default: the clock).  Returns how many fired."""
        now = self.now() if now is None else now
        fired = 0
        while self._timers and self._timers[0].due <= now:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        return fired

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward, firing callbacks in due order —
        including ones scheduled by earlier callbacks inside the window.
        """
        if self._clock is not None:
            raise RuntimeError("advance() needs the virtual clock; this scheduler has a real one")
        target = self._now + seconds
        fired = 0
        while self._timers and self._timers[0].due <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = max(self._now, timer.due)
            timer.callback()
            fired += 1
        self._now = target
        return fired


# ---------------------------------------------------------------------------
# asyncio scheduler
# ---------------------------------------------------------------------------
class AsyncioScheduler(Scheduler):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)

    def cancel(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()
