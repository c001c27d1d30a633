# deepstoker/reactor/critical.py
"""Critical-condition tracking and the emergency purge."""

import logging

from deepstoker.core.constants import (
    CRITICAL_THRESHOLD,
    PURGE_HULL_COST,
    PURGE_RESET_LEVEL,
    PURGE_TRIGGER_SECONDS,
)
from deepstoker.reactor.state import CriticalTimers, Metric, SimulationState

logger = logging.getLogger(__name__)


class CriticalMonitor:
    """Times how long each metric has stayed above the critical threshold.

    The purge affordance appears once any metric has been critical for more
    than five seconds and only goes away once every timer is back at zero.
    """

    def __init__(self):
        self.timers = CriticalTimers()
        self.show_purge = False

    def update(self, state: SimulationState, dt: float):
        for metric in Metric:
            if state.get_metric(metric) > CRITICAL_THRESHOLD:
                self.timers.set(metric, self.timers.get(metric) + dt)
            else:
                self.timers.set(metric, 0.0)

        if any(self.timers.get(metric) > PURGE_TRIGGER_SECONDS for metric in Metric):
            if not self.show_purge:
                logger.info("Purge affordance raised")
            self.show_purge = True
        elif self.show_purge and self.timers.all_clear():
            self.show_purge = False

    def should_show_purge(self) -> bool:
        return self.show_purge

    def reset(self):
        self.timers.reset()
        self.show_purge = False


def apply_purge(state: SimulationState, monitor: CriticalMonitor) -> float:
    """Vent all three metrics back to 20 at a fixed hull cost.

    Returns:
        float: Hull integrity remaining after the purge
    """
    for metric in Metric:
        state.set_metric(metric, PURGE_RESET_LEVEL)
    state.hull_integrity = max(0.0, state.hull_integrity - PURGE_HULL_COST)
    monitor.reset()
    return state.hull_integrity
