# deepstoker/core/scheduler.py
"""
Cancellable delayed-task scheduling.

The engine never talks to timers directly. It asks a scheduler to run a
callback after a delay and keeps the returned task handle so it can cancel
or replace it later. Two schedulers are provided:

* ``ThreadingScheduler`` runs callbacks on ``threading.Timer`` threads in
  real time.
* ``ManualScheduler`` keeps a virtual clock that only moves when
  ``advance()`` is called, which makes whole shifts reproducible and lets a
  headless run finish in milliseconds.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a callback waiting to run."""

    def __init__(self, due: float, callback: Callable[[], None], timer: Optional[threading.Timer] = None):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.done = False
        self._timer = timer

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> bool:
        """Cancel the task.

        Returns:
            bool: True if the task was still pending.
        """
        if not self.pending:
            return False
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        return True

    def run(self):
        if not self.pending:
            return
        self.done = True
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Error in scheduled task: {e}")


class ThreadingScheduler:
    """Real-time scheduler backed by daemon ``threading.Timer`` threads."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        delay = max(0.0, float(delay))
        task = ScheduledTask(self.now() + delay, callback)
        timer = threading.Timer(delay, task.run)
        timer.daemon = True
        task._timer = timer
        timer.start()
        return task


class ManualScheduler:
    """Virtual-time scheduler driven explicitly by ``advance``.

    Tasks run in due-time order (ties in scheduling order). Tasks scheduled
    from inside a callback run in the same ``advance`` call if they fall due
    before its end.
    """

    def __init__(self, start_time: float = 0.0):
        self._now = float(start_time)
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(self._now + max(0.0, float(delay)), callback)
        heapq.heappush(self._queue, (task.due, next(self._sequence), task))
        return task

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, running every task that falls due.

        Args:
            seconds (float): How far to move the clock.

        Returns:
            int: Number of tasks that ran.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative amount ({seconds})")

        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if not task.pending:
                continue
            self._now = due
            task.run()
            ran += 1
        self._now = target
        return ran

    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._queue if task.pending)
