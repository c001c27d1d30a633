# deepstoker/reactor/hazards.py
"""
Randomized hazard timeline.

Hazards are transient: each one raises a flag in ``HazardState``, logs its
name, fires a notification hook and clears itself after a hazard-specific
duration. The scheduler keeps one pending "next hazard" task plus at most
one clear task per hazard kind, all cancellable.
"""

import logging
from contextlib import nullcontext
from enum import Enum
from typing import Callable, Dict, Optional

from deepstoker.core import event_bus
from deepstoker.core.constants import (
    DEEP_SEA_ENTITY_DURATION,
    DEFAULT_HAZARD_POLL_INTERVAL,
    EARLY_PHASE_END,
    HEAVY_CURRENT_DURATION,
    HEAVY_CURRENT_EARLY_DELAY,
    SLIDER_COUNT,
    SLIDER_JAM_DURATION,
    STEADY_PHASE_DELAY,
    TRENCH_LIGHTNING_DURATION,
    TRENCH_LIGHTNING_EARLY_DELAY,
)
from deepstoker.core.scheduler import ScheduledTask
from deepstoker.reactor.state import HazardState, SimulationState

logger = logging.getLogger(__name__)


class HazardKind(Enum):
    """Hazards and the log message each one raises."""
    TRENCH_LIGHTNING = "TRENCH LIGHTNING"
    HEAVY_CURRENT = "HEAVY CURRENT"
    DEEP_SEA_ENTITY = "DEEP-SEA ENTITY"
    SLIDER_JAM = "SLIDER JAMMED"


# Steady-phase draw; equal weights
STEADY_PHASE_WEIGHTS = [
    (HazardKind.TRENCH_LIGHTNING, 0.25),
    (HazardKind.HEAVY_CURRENT, 0.25),
    (HazardKind.DEEP_SEA_ENTITY, 0.25),
    (HazardKind.SLIDER_JAM, 0.25),
]

_FLAG_FIELDS = {
    HazardKind.TRENCH_LIGHTNING: "trench_lightning",
    HazardKind.HEAVY_CURRENT: "heavy_current",
    HazardKind.DEEP_SEA_ENTITY: "deep_sea_entity",
}


def _uniform(rng, bounds):
    low, high = bounds
    return low + rng.random() * (high - low)


class HazardScheduler:
    """Self-rescheduling hazard generator for one shift."""

    def __init__(self, scheduler, state: SimulationState, rng,
                 log: Callable[[str], object], events: event_bus.EventBus,
                 on_change: Callable[[], None], guard=None,
                 poll_interval: float = DEFAULT_HAZARD_POLL_INTERVAL):
        """
        Args:
            scheduler: Provides ``call_later(delay, callback)``
            state: Live session state; read for phase, pause and activity
            rng: ``random.Random``-compatible source
            log: Appends a message to the shift log
            events: Bus receiving ``hazard_alert`` / ``metal_creak`` hooks
            on_change: Called after every hazard flag transition
            guard: Context manager held while timer callbacks run
            poll_interval: Seconds between checks while the shift is paused
        """
        self.scheduler = scheduler
        self.state = state
        self.rng = rng
        self.log = log
        self.events = events
        self.on_change = on_change
        self.guard = guard if guard is not None else nullcontext()
        self.poll_interval = poll_interval

        self.hazards = HazardState()
        self.running = False
        self.stopped = False
        self._next_task: Optional[ScheduledTask] = None
        self._clear_tasks: Dict[HazardKind, ScheduledTask] = {}

    # ----- Lifecycle -----
    def start(self):
        if self.running or self.stopped:
            return False
        self.running = True
        self.schedule_next()
        return True

    def stop(self):
        """Cancel the pending hazard and every pending clear."""
        self.running = False
        self.stopped = True
        if self._next_task is not None:
            self._next_task.cancel()
            self._next_task = None
        for task in self._clear_tasks.values():
            task.cancel()
        self._clear_tasks.clear()

    def _guarded(self, fn, *args):
        def run():
            with self.guard:
                if self.stopped:
                    return
                fn(*args)
        return run

    # ----- Scheduling -----
    def schedule_next(self):
        if not self.running or not self.state.is_active:
            return

        if self._next_task is not None:
            self._next_task.cancel()

        if self.state.is_paused:
            self._next_task = self.scheduler.call_later(self.poll_interval, self._guarded(self.schedule_next))
            return

        if self.state.elapsed_time < EARLY_PHASE_END:
            if self.rng.random() < 0.5:
                kind = HazardKind.HEAVY_CURRENT
                delay = _uniform(self.rng, HEAVY_CURRENT_EARLY_DELAY)
            else:
                kind = HazardKind.TRENCH_LIGHTNING
                delay = _uniform(self.rng, TRENCH_LIGHTNING_EARLY_DELAY)
        else:
            # Kind is drawn when the timer fires
            kind = None
            delay = _uniform(self.rng, STEADY_PHASE_DELAY)

        logger.debug(f"Next hazard ({kind.value if kind else 'random'}) in {delay:.1f}s")
        self._next_task = self.scheduler.call_later(delay, self._guarded(self._fire, kind))

    def _fire(self, kind: Optional[HazardKind]):
        self._next_task = None
        if not self.running or not self.state.is_active:
            return

        if self.state.is_paused:
            # Falls back into the pause polling loop
            self.schedule_next()
            return

        if kind is None:
            self.trigger_random()
        else:
            self.trigger(kind)

        self.schedule_next()

    def choose_random_kind(self) -> HazardKind:
        roll = self.rng.random()
        cumulative = 0.0
        for kind, weight in STEADY_PHASE_WEIGHTS:
            cumulative += weight
            if roll < cumulative:
                return kind
        return STEADY_PHASE_WEIGHTS[-1][0]

    def trigger_random(self) -> bool:
        if not self.state.is_active or self.state.is_paused:
            return False
        return self.trigger(self.choose_random_kind())

    # ----- Effects -----
    def trigger(self, kind: HazardKind, slider: Optional[int] = None) -> bool:
        """Start a hazard immediately.

        Args:
            kind: Hazard to start
            slider: Slider to jam (SLIDER_JAM only); random when omitted

        Returns:
            bool: True if the hazard took effect
        """
        if not self.state.is_active or self.state.is_paused or self.stopped:
            return False

        if kind is HazardKind.SLIDER_JAM:
            if self.hazards.jammed_slider is not None:
                logger.debug("Slider jam dropped: a slider is already jammed")
                return False
            if slider is None:
                slider = self.rng.randrange(SLIDER_COUNT)
            elif slider not in range(SLIDER_COUNT):
                raise ValueError(f"Slider index must be 0-{SLIDER_COUNT - 1}, got {slider}")
            self.hazards.jammed_slider = slider
            duration = SLIDER_JAM_DURATION
            hook = event_bus.METAL_CREAK
        else:
            setattr(self.hazards, _FLAG_FIELDS[kind], True)
            duration = self._duration(kind)
            hook = event_bus.HAZARD_ALERT

        self.log(kind.value)
        self.events.publish(hook, {"hazard": kind.name, "duration": duration,
                                   "slider": self.hazards.jammed_slider}, source="hazards")
        logger.info(f"Hazard {kind.name} for {duration:.1f}s")

        # Re-triggering an active hazard extends it
        previous = self._clear_tasks.pop(kind, None)
        if previous is not None:
            previous.cancel()
        self._clear_tasks[kind] = self.scheduler.call_later(duration, self._guarded(self._clear, kind))

        self.on_change()
        return True

    def _duration(self, kind: HazardKind) -> float:
        if kind is HazardKind.TRENCH_LIGHTNING:
            return TRENCH_LIGHTNING_DURATION
        if kind is HazardKind.HEAVY_CURRENT:
            return _uniform(self.rng, HEAVY_CURRENT_DURATION)
        return _uniform(self.rng, DEEP_SEA_ENTITY_DURATION)

    def _clear(self, kind: HazardKind):
        self._clear_tasks.pop(kind, None)
        if kind is HazardKind.SLIDER_JAM:
            self.hazards.jammed_slider = None
            self.log("SLIDER UNJAMMED")
        else:
            setattr(self.hazards, _FLAG_FIELDS[kind], False)
        logger.debug(f"Hazard {kind.name} cleared")
        self.on_change()

    def is_jammed(self, slider: int) -> bool:
        return self.hazards.jammed_slider == slider
