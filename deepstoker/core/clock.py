# deepstoker/core/clock.py
"""Fixed-cadence tick driver."""

import logging
from typing import Callable, Optional

from deepstoker.core.constants import DEFAULT_TICK_INTERVAL
from deepstoker.core.scheduler import ScheduledTask

logger = logging.getLogger(__name__)


class TickDriver:
    """
    Calls ``on_tick(interval)`` every ``interval`` seconds of scheduler time.

    The driver owns a single pending task at a time. ``pause`` keeps the
    cadence running but suppresses the callback; ``stop`` cancels the
    pending task so nothing fires afterwards.
    """

    def __init__(self, scheduler, on_tick: Callable[[float], None], interval: float = DEFAULT_TICK_INTERVAL):
        """
        Initialize the driver

        Args:
            scheduler: Object providing ``call_later(delay, callback)``
            on_tick (callable): Receives the tick interval in seconds
            interval (float): Seconds between ticks
        """
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")

        self.scheduler = scheduler
        self.on_tick = on_tick
        self.interval = interval
        self.running = False
        self.paused = False
        self.tick_count = 0
        self._task: Optional[ScheduledTask] = None

    def start(self):
        """
        Start ticking

        Returns:
            bool: True if the driver was started, False if already running
        """
        if self.running:
            return False

        self.running = True
        self.paused = False
        self._schedule()
        logger.debug(f"Tick driver started at {self.interval}s cadence")
        return True

    def stop(self):
        """
        Stop ticking and cancel the pending tick

        Returns:
            bool: True if the driver was running
        """
        if not self.running:
            return False

        self.running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.debug(f"Tick driver stopped after {self.tick_count} ticks")
        return True

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def _schedule(self):
        self._task = self.scheduler.call_later(self.interval, self._fire)

    def _fire(self):
        if not self.running:
            return

        if not self.paused:
            self.tick_count += 1
            self.on_tick(self.interval)

        # on_tick may have stopped the driver
        if self.running:
            self._schedule()
