"""Define single-threaded event dispatch loops that run action callbacks sequentially.

All callbacks posted to a loop run one at a time on the thread that called `run()`. Transports
    may post from other threads; the loop's queue is the only synchronization point.
"""

from __future__ import annotations

import heapq
import itertools
import queue
import time
from dataclasses import dataclass, field
from typing import Callable

from mobility_teleop.io.logging import log_info

Callback = Callable[[], None]


@dataclass(order=True)
class TimerHandle:
    """A callback scheduled to run on a dispatch loop at a given time."""

    when_s: float
    sequence: int
    callback: Callback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        """Prevent the scheduled callback from running (no effect if it already ran)."""
        self.cancelled = True


class DispatchLoop:
    """An event loop which consumes posted callbacks and timers on a single thread."""

    def __init__(self) -> None:
        """Initialize an empty loop; call `run()` to begin dispatching."""
        self._queue: queue.SimpleQueue[Callback] = queue.SimpleQueue()
        self._timers: list[TimerHandle] = []
        self._sequence = itertools.count()
        self._stop_requested = False

    def time(self) -> float:
        """Retrieve the loop's current time (seconds)."""
        return time.monotonic()

    @property
    def is_running(self) -> bool:
        """Check whether the loop is dispatching and has not been asked to shut down."""
        return not self._stop_requested

    def post(self, callback: Callback) -> None:
        """Enqueue a callback to run on the loop thread (safe to call from any thread)."""
        self._queue.put(callback)

    def call_later(self, delay_s: float, callback: Callback) -> TimerHandle:
        """Schedule a callback to run after the given delay (seconds).

        Timers must be scheduled from the loop thread, e.g., from within another callback.
        """
        handle = TimerHandle(self.time() + max(0.0, delay_s), next(self._sequence), callback)
        heapq.heappush(self._timers, handle)
        return handle

    def shutdown(self) -> None:
        """Request that the loop stop after the callback currently running."""
        self._stop_requested = True

    def run(self) -> None:
        """Dispatch callbacks and timers until `shutdown()` is called."""
        self._stop_requested = False
        while not self._stop_requested:
            self._run_due_timers()
            if self._stop_requested:
                break

            callback = self._next_callback()
            if callback is not None:
                callback()
            elif self._idle():
                break

        log_info("Dispatch loop stopped.")

    def _run_due_timers(self) -> None:
        """Run every timer whose scheduled time has passed, in order of their deadlines."""
        while self._timers and not self._stop_requested:
            handle = self._timers[0]
            if handle.cancelled:
                heapq.heappop(self._timers)
                continue
            if handle.when_s > self.time():
                return
            heapq.heappop(self._timers)
            handle.callback()

    def _next_timer_s(self) -> float | None:
        """Retrieve the time of the earliest pending timer, or None if there is none."""
        while self._timers and self._timers[0].cancelled:
            heapq.heappop(self._timers)
        return self._timers[0].when_s if self._timers else None

    def _next_callback(self) -> Callback | None:
        """Wait for the next posted callback, returning None once a timer falls due."""
        next_timer_s = self._next_timer_s()
        timeout_s = None if next_timer_s is None else max(0.0, next_timer_s - self.time())
        try:
            return self._queue.get(timeout=timeout_s)
        except queue.Empty:
            return None

    def _idle(self) -> bool:
        """Handle the loop having nothing queued; return True to stop dispatching."""
        return False


class VirtualTimeLoop(DispatchLoop):
    """A dispatch loop whose clock jumps forward to the next timer instead of sleeping.

    The loop returns from `run()` once nothing is queued and no timers remain.
    """

    def __init__(self, start_s: float = 0.0) -> None:
        """Initialize the loop with its virtual clock at the given time (seconds)."""
        super().__init__()
        self._now_s = start_s

    def time(self) -> float:
        """Retrieve the loop's virtual time (seconds)."""
        return self._now_s

    def _next_callback(self) -> Callback | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def _idle(self) -> bool:
        next_timer_s = self._next_timer_s()
        if next_timer_s is None:
            return True
        self._now_s = max(self._now_s, next_timer_s)
        return False
