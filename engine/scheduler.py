"""
scheduler.py — Deferred-Callback Schedulers
============================================
The playback driver never sleeps.  It asks a scheduler to call it back
after `delay_ms` and keeps the returned handle so it can cancel it.

Two implementations share the same two-method surface
(`call_later(delay_ms, callback) -> handle`, `handle.cancel()`):

  • TickScheduler     – nothing runs until the host calls run_due().
                        The web app calls it on every state poll; tests
                        drive it with a fake clock.
  • AsyncioScheduler  – thin wrapper over loop.call_later for asyncio hosts.

Design decisions:
  - TickScheduler fires callbacks on *virtual* time: while a callback
    runs, "now" is the time it was due, so a 10 ms step cadence polled
    every 100 ms still advances ~10 steps per poll instead of one.
  - A burst is capped (max_batch) so a tab left idle for minutes does
    not replay thousands of steps in one request.
"""

import asyncio
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]

DEFAULT_MAX_BATCH = 500


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------
class TickHandle:
    __slots__ = ("when", "seq", "callback", "cancelled")

    def __init__(self, when: float, seq: int, callback: Callback):
        self.when      = when
        self.seq       = seq
        self.callback  = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "TickHandle") -> bool:
        return (self.when, self.seq) < (other.when, other.seq)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"TickHandle(when={self.when:.1f}, {state})"


# ---------------------------------------------------------------------------
# TickScheduler
# ---------------------------------------------------------------------------
class TickScheduler:
    """
    Attributes:
        clock     : Zero-arg callable returning seconds (time.monotonic by default).
        max_batch : Upper bound on callbacks fired by one run_due() call.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_batch: int = DEFAULT_MAX_BATCH):
        self.clock     = clock
        self.max_batch = max_batch
        self._queue:   List[TickHandle]  = []
        self._seq      = itertools.count()
        self._virtual: Optional[float]   = None

    def now_ms(self) -> float:
        if self._virtual is not None:
            return self._virtual
        return self.clock() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> TickHandle:
        handle = TickHandle(self.now_ms() + max(0.0, delay_ms), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def run_due(self) -> int:
        """Fire every callback that is due by now.  Returns how many ran."""
        now = self.clock() * 1000.0
        fired = 0
        while self._queue and fired < self.max_batch:
            handle = self._queue[0]
            if handle.cancelled:
                heapq.heappop(self._queue)
                continue
            if handle.when > now:
                break
            heapq.heappop(self._queue)
            self._virtual = handle.when
            try:
                handle.callback()
            finally:
                self._virtual = None
            fired += 1

        if fired >= self.max_batch:
            logger.debug("tick batch capped at %d callbacks", fired)
        return fired

    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def cancel_all(self) -> None:
        for handle in self._queue:
            handle.cancel()
        self._queue.clear()


# ---------------------------------------------------------------------------
# AsyncioScheduler
# ---------------------------------------------------------------------------
class AsyncioScheduler:
    """Schedules on an asyncio loop; handles are asyncio.TimerHandle."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)
