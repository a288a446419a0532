"""
scheduler.py — Timer back-ends for the Player
==============================================
The Player never sleeps and never owns a thread.  It asks a scheduler to
call it back later:

    handle = scheduler.call_later(delay_seconds, callback)
    handle.cancel()

Two implementations:

  • ThreadingScheduler – one daemon `threading.Timer` per pending call.
                         Used by the HTTP server.
  • ManualScheduler    – a virtual clock advanced by hand.  Used by the
                         tests and by hosts that run their own event loop
                         (call `advance()` from it).
"""

import heapq
import itertools
import threading
from typing import Callable, List, Tuple


Callback = Callable[[], None]


# ---------------------------------------------------------------------------
# Real threads
# ---------------------------------------------------------------------------
class TimerHandle:
    __slots__ = ("_timer",)

    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return TimerHandle(timer)


# ---------------------------------------------------------------------------
# Virtual clock
# ---------------------------------------------------------------------------
class ManualHandle:
    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callback):
        self.due       = due
        self.callback  = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler: nothing happens until `advance()` moves the
    clock.  Callbacks scheduled *during* an advance run in the same call
    if they fall due before it ends.
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward; returns how many callbacks ran."""
        deadline = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.callback()
            fired += 1
        self.now = deadline
        return fired

    def run_all(self, limit: int = 1_000_000) -> int:
        """Fire callbacks until none are pending (or `limit` is hit)."""
        fired = 0
        while fired < limit:
            live = [entry for entry in self._queue if not entry[2].cancelled]
            if not live:
                break
            fired += self.advance(max(0.0, min(e[0] for e in live) - self.now))
        return fired

    @property
    def pending(self) -> int:
        """Number of scheduled, not-yet-cancelled callbacks."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)
