"""
Purpose: Clock / delayed-callback abstraction for the engine.
What it does:
Every simulated latency (debounce window, distance recalculation, quote,
lifecycle transitions) is a cancellable deferred callback registered here.

- VirtualClock: deterministic, time only moves when `advance()` is called.
  Used by tests and the simulation script to fast-forward 15 s in 0 ms.
- AsyncioScheduler: thin wrapper over `loop.call_later` for a live process.

Rule: No dispatch rules here. The scheduler only knows "call this later".
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Any, Callable, List, Optional, Protocol, Tuple


class Cancellable(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """
    What the engine needs from a clock. `asyncio.TimerHandle` already
    satisfies the handle side of it.
    """

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


class TimerHandle:
    """
    A pending callback on the VirtualClock.
    """

    __slots__ = ("when", "_callback", "_args", "_cancelled")

    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        # drop references so cancelled timers don't pin sessions in memory
        self._callback = None
        self._args = ()

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        if self._cancelled:
            return
        callback, args = self._callback, self._args
        self._cancelled = True
        callback(*args)


class VirtualClock:
    """
    Deterministic scheduler driven by hand.

    Callbacks run in order of due time; callbacks due at the same instant run
    in the order they were scheduled. Callbacks scheduled while advancing run
    in the same `advance()` call if they fall due before the target time.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be >= 0")

        handle = TimerHandle(self._now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    def pending(self) -> int:
        """
        Number of scheduled callbacks that have not run or been cancelled.
        """
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())

    def advance(self, seconds: float) -> int:
        """
        Move time forward by `seconds`, running every callback that falls due.
        Returns how many callbacks actually ran.

        If a callback raises, the clock stops at that callback's due time and
        the exception propagates; callbacks due later stay queued and run on
        the next advance.
        """
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")

        target = self._now + seconds
        executed = 0

        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled():
                continue
            self._now = when
            handle._run()
            executed += 1

        self._now = target
        return executed

    def run_until_idle(self, limit: float = 3600.0) -> int:
        """
        Advance until nothing is left to run (or `limit` seconds have passed).
        """
        executed = 0
        deadline = self._now + limit

        while True:
            live = [entry for entry in self._queue if not entry[2].cancelled()]
            if not live:
                break
            next_due = min(entry[0] for entry in live)
            if next_due > deadline:
                break
            executed += self.advance(next_due - self._now)

        return executed


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    If no loop is given, the running loop is looked up at call time, so the
    object can be built before the loop starts.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback, *args)
