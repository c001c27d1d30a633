# deepstoker/reactor/engine.py
"""
Reactor simulation engine.

One ``ReactorEngine`` runs one shift at a time. The presentation layer calls
``initialize`` and ``start``, forwards player input to ``apply_control`` /
``trigger_emergency_purge`` / ``set_paused``, and renders the snapshots it
receives. All mutation happens under a single re-entrant lock, whether it
comes from a caller, the tick driver or a hazard timer.
"""

import logging
import math
import random
import threading
from typing import Callable, Iterable, Optional

from deepstoker.config import EngineConfig, ShiftConfig
from deepstoker.core import event_bus
from deepstoker.core.clock import TickDriver
from deepstoker.core.constants import (
    CONTROL_REDUCTION_RANGE,
    DEFAULT_HULL_INTEGRITY,
    HULL_ALARM_CHANCE,
    HULL_CRITICAL_THRESHOLD,
    LOW_POWER_HUM_CHANCE,
    LOW_POWER_HUM_THRESHOLD,
    METRIC_MAX,
    NOMINAL_BAND,
    NOMINAL_LOG_INTERVAL,
    SLIDER_COUNT,
)
from deepstoker.core.scheduler import ThreadingScheduler
from deepstoker.reactor.critical import CriticalMonitor, apply_purge
from deepstoker.reactor.drift import DriftModel
from deepstoker.reactor.event_log import EventLog
from deepstoker.reactor.hazards import HazardKind, HazardScheduler
from deepstoker.reactor.modifiers import drift_baseline
from deepstoker.reactor.scoring import RewardBreakdown, compute_reward
from deepstoker.reactor.state import (
    Control,
    LogEntry,
    Metric,
    SessionSnapshot,
    SimulationState,
    TerminalCause,
    TerminalResult,
)
from deepstoker.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Float slack when comparing accumulated elapsed time to the shift duration
_TIME_EPSILON = 1e-9


class SessionObserver:
    """Receives engine output. Subclass and override either method."""

    def on_tick(self, snapshot: SessionSnapshot):
        pass

    def on_terminal(self, result: TerminalResult):
        pass


class CallbackObserver(SessionObserver):
    """Adapts a pair of plain callables to ``SessionObserver``."""

    def __init__(self, on_update: Optional[Callable] = None, on_terminal: Optional[Callable] = None):
        self._on_update = on_update
        self._on_terminal = on_terminal

    def on_tick(self, snapshot):
        if self._on_update is not None:
            self._on_update(snapshot)

    def on_terminal(self, result):
        if self._on_terminal is not None:
            self._on_terminal(result)


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        if isinstance(value, str) and value.upper() in enum_cls.__members__:
            return enum_cls[value.upper()]
        return None


class ReactorEngine:
    """Owns one reactor session and drives it forward."""

    def __init__(self, scheduler=None, rng: Optional[random.Random] = None,
                 config: Optional[EngineConfig] = None, events: Optional[event_bus.EventBus] = None):
        """
        Initialize the engine

        Args:
            scheduler: Task scheduler; real-time ``ThreadingScheduler`` by default
            rng: Random source; seeded from ``config.seed`` by default
            config: Runtime settings
            events: Notification hook bus; a private one by default
        """
        self.config = config or EngineConfig()
        self.scheduler = scheduler or ThreadingScheduler()
        self.rng = rng or random.Random(self.config.seed)
        self.events = events or event_bus.EventBus()

        self._lock = threading.RLock()
        self._session = 0
        self._observer: Optional[SessionObserver] = None
        self._driver: Optional[TickDriver] = None
        self._result: Optional[TerminalResult] = None
        self._finalized = False
        self._last_nominal_log = self.scheduler.now()

        self.state = SimulationState()
        self.drift = DriftModel()
        self.critical = CriticalMonitor()
        self.event_log = EventLog(self.config.max_log_entries)
        self.hazards = self._new_hazard_scheduler()

    def _new_hazard_scheduler(self) -> HazardScheduler:
        return HazardScheduler(
            self.scheduler, self.state, self.rng,
            log=self._log, events=self.events, on_change=self._emit,
            guard=self._lock, poll_interval=self.config.hazard_poll_interval,
        )

    # ----- Session lifecycle -----
    def initialize(self, rank: str = "Novice", upgrades: Iterable[str] = (),
                   initial_hull_integrity: float = DEFAULT_HULL_INTEGRITY, config=None) -> SessionSnapshot:
        """
        Configure a fresh session, discarding any session in flight

        Args:
            rank (str): Career rank; scales drift and reward
            upgrades (iterable): Owned upgrade names
            initial_hull_integrity (float): Hull carried over from the career
            config: ``ShiftConfig`` or mapping with duration, reactorType, difficultyMult

        Returns:
            SessionSnapshot: State of the new session

        Raises:
            ConfigurationError: If the shift cannot be run as configured
        """
        shift = ShiftConfig.coerce(config)
        if not isinstance(rank, str):
            raise ConfigurationError(f"Rank must be a string (got {rank!r})")
        if isinstance(upgrades, str):
            raise ConfigurationError("Upgrades must be a collection of names, not a single string")
        if (isinstance(initial_hull_integrity, bool) or not isinstance(initial_hull_integrity, (int, float))
                or not math.isfinite(initial_hull_integrity)):
            raise ConfigurationError(f"Hull integrity must be a finite number (got {initial_hull_integrity!r})")

        with self._lock:
            self._teardown()
            self._session += 1
            self._result = None
            self._finalized = False

            self.state = SimulationState(
                hull_integrity=initial_hull_integrity,
                shift_duration=shift.duration,
                difficulty_mult=shift.difficulty_mult,
                reactor_type=shift.reactor_type,
                rank=rank,
                upgrades=frozenset(str(u) for u in upgrades),
                is_active=True,
            )
            self.drift.reset(drift_baseline(shift.reactor_type))
            self.critical.reset()
            self.event_log.clear()
            self.hazards = self._new_hazard_scheduler()
            self._last_nominal_log = self.scheduler.now()

            self._log(f"SHIFT STARTED: {shift.duration:g}s GOAL")
            logger.info(
                f"Session {self._session} initialized: {shift.duration:g}s {shift.reactor_type.value} "
                f"reactor, rank {rank}, hull {self.state.hull_integrity:g}"
            )
            return self.get_state()

    def start(self, on_update: Optional[Callable] = None, on_terminal: Optional[Callable] = None,
              observer: Optional[SessionObserver] = None):
        """
        Begin ticking the current session and start the hazard timeline

        Args:
            on_update (callable): Receives a ``SessionSnapshot`` after every change
            on_terminal (callable): Receives the ``TerminalResult`` once
            observer (SessionObserver): Used instead of the two callables when given
        """
        with self._lock:
            if not self.state.is_active:
                logger.warning("start() ignored: no active session, call initialize() first")
                return

            self._observer = observer or CallbackObserver(on_update, on_terminal)

            if self._driver is not None:
                self._driver.stop()
            session = self._session
            self._driver = TickDriver(
                self.scheduler,
                lambda dt: self._on_clock_tick(session, dt),
                interval=self.config.tick_interval,
            )
            self._driver.start()
            self.hazards.start()
            logger.info(f"Session {session} started")

    def stop(self):
        """Halt the session. No callbacks fire afterwards."""
        with self._lock:
            was_active = self.state.is_active
            self._teardown()
            if was_active:
                logger.info(f"Session {self._session} stopped")

    def _teardown(self):
        if self._driver is not None:
            self._driver.stop()
            self._driver = None
        self.hazards.stop()
        self.state.is_active = False
        self._observer = None

    def set_paused(self, paused: bool):
        with self._lock:
            if not self.state.is_active or self.state.is_paused == bool(paused):
                return
            self.state.is_paused = bool(paused)
            if paused:
                self.events.publish(event_bus.STATIC_NOISE, {"paused": True}, source="engine")
            logger.info("Shift paused" if paused else "Shift resumed")
            self._emit()

    def _on_clock_tick(self, session: int, dt: float):
        with self._lock:
            if session != self._session:
                return
            self.tick(dt)

    # ----- Simulation step -----
    def tick(self, dt: float) -> SessionSnapshot:
        """
        Advance the session by ``dt`` seconds

        No-op while inactive or paused.

        Args:
            dt (float): Seconds of shift time to simulate

        Returns:
            SessionSnapshot: State after the step
        """
        with self._lock:
            state = self.state
            if not state.is_active or state.is_paused:
                return self.get_state()
            if dt <= 0:
                logger.warning(f"Ignoring non-positive tick delta {dt}")
                return self.get_state()

            state.survival_time += dt
            state.elapsed_time += dt

            # Duration is checked before drift, so a shift that ends on the
            # same tick a metric would saturate counts as a success.
            if state.elapsed_time >= state.shift_duration - _TIME_EPSILON:
                self._finalize(True, TerminalCause.SUCCESS)
                return self.get_state()

            self.drift.decay(dt)

            for metric in Metric:
                rise = self.drift.drift(metric, state.survival_time, state.rank, state.upgrades)
                state.set_metric(metric, state.get_metric(metric) + rise)

            self.critical.update(state, dt)
            self._check_nominal_status()
            self._ambient_hooks()

            if any(value >= METRIC_MAX for value in state.metrics().values()):
                self._finalize(False, TerminalCause.MELTDOWN)
                return self.get_state()

            if state.hull_integrity <= 0:
                self.events.publish(event_bus.IMPLOSION, {"hull_integrity": 0.0}, source="engine")
                self._finalize(False, TerminalCause.IMPLOSION)
                return self.get_state()

            self._emit()
            return self.get_state()

    def _check_nominal_status(self) -> bool:
        low, high = NOMINAL_BAND
        if not all(low <= value <= high for value in self.state.metrics().values()):
            return False

        now = self.scheduler.now()
        if now - self._last_nominal_log > NOMINAL_LOG_INTERVAL:
            self._log("STATUS: NOMINAL")
            self._last_nominal_log = now
            return True
        return False

    def _ambient_hooks(self):
        state = self.state
        if any(value > LOW_POWER_HUM_THRESHOLD for value in state.metrics().values()):
            if self.rng.random() < LOW_POWER_HUM_CHANCE:
                self.events.publish(event_bus.LOW_POWER_HUM, None, source="engine")

        if 0 < state.hull_integrity < HULL_CRITICAL_THRESHOLD and not state.is_paused:
            if self.rng.random() < HULL_ALARM_CHANCE:
                self.events.publish(event_bus.HULL_CRITICAL_ALARM,
                                    {"hull_integrity": state.hull_integrity}, source="engine")

    # ----- Termination -----
    def finalize(self, success: bool, cause: Optional[TerminalCause] = None):
        """End the session and report the outcome. Idempotent."""
        if cause is None:
            cause = TerminalCause.SUCCESS if success else TerminalCause.MELTDOWN
        with self._lock:
            self._finalize(success, cause)

    def _finalize(self, success: bool, cause: TerminalCause):
        if self._finalized:
            return
        self._finalized = True

        if self._driver is not None:
            self._driver.stop()
            self._driver = None
        self.hazards.stop()

        state = self.state
        state.is_active = False
        state.is_complete = True
        state.success = success

        if success:
            self._log("REACTOR STABILIZED: SHIFT COMPLETE")
            self.events.publish(event_bus.SUCCESS_CHIME, None, source="engine")
            logger.info(f"Shift complete after {state.elapsed_time:.1f}s")
        else:
            self._log(f"CRITICAL FAILURE: {cause.value}")
            logger.warning(f"Shift failed ({cause.value}) after {state.elapsed_time:.1f}s")

        snapshot = self.get_state()
        self._result = TerminalResult(
            success=success,
            cause=cause,
            temperature=state.temperature,
            pressure=state.pressure,
            containment=state.containment,
            hull_integrity=state.hull_integrity,
            elapsed_time=state.elapsed_time,
            survival_time=state.survival_time,
            snapshot=snapshot,
        )

        self._emit(snapshot)
        observer = self._observer
        if observer is not None:
            try:
                observer.on_terminal(self._result)
            except Exception as e:
                logger.error(f"Error in terminal callback: {e}")

    @property
    def result(self) -> Optional[TerminalResult]:
        return self._result

    # ----- Player actions -----
    def apply_control(self, control, is_in_optimal_band: bool = False) -> float:
        """
        Apply a player control to its metric

        Args:
            control (Control or str): VENT_PRESSURE, INJECT_COOLANT or STABILIZE_MAGNETICS
            is_in_optimal_band (bool): Whether the control now sits in its optimal band

        Returns:
            float: Amount the metric was reduced by, 0.0 if the input was ignored
        """
        with self._lock:
            resolved = _coerce_enum(Control, control)
            if resolved is None:
                logger.warning(f"Ignoring unknown control {control!r}")
                return 0.0

            state = self.state
            if not state.is_active or state.is_paused:
                return 0.0
            if self.hazards.is_jammed(resolved.slider_index):
                logger.debug(f"{resolved.value} input blocked: slider jammed")
                return 0.0

            low, high = CONTROL_REDUCTION_RANGE
            reduction = float(self.rng.randint(low, high))

            self._set_alignment(resolved.metric, is_in_optimal_band)
            state.set_metric(resolved.metric, state.get_metric(resolved.metric) - reduction)

            self._emit()
            return reduction

    def set_control_alignment(self, metric, is_in_optimal_band: bool):
        """Report whether a metric's control sits in its optimal band without moving the metric."""
        with self._lock:
            resolved = _coerce_enum(Metric, metric)
            if resolved is None:
                logger.warning(f"Ignoring unknown metric {metric!r}")
                return
            if not self.state.is_active:
                return
            self._set_alignment(resolved, is_in_optimal_band)
            self._emit()

    def _set_alignment(self, metric: Metric, aligned: bool):
        was_aligned = self.drift.alignment.get(metric)
        if self.drift.set_alignment(metric, aligned, paused=self.state.is_paused):
            self._log("DRIFT SPIKE")
        elif aligned and not was_aligned:
            self.events.publish(event_bus.CONTROL_ALIGNED, {"metric": metric.value}, source="engine")

    def trigger_emergency_purge(self) -> bool:
        """
        Vent every metric to 20 at the cost of 15 hull integrity

        Returns:
            bool: True if the purge took effect
        """
        with self._lock:
            if not self.state.is_active or self.state.is_paused:
                return False

            hull = apply_purge(self.state, self.critical)
            self._log("EMERGENCY PURGE ACTIVATED")
            self.events.publish(event_bus.METAL_CREAK, {"hull_integrity": hull}, source="engine")
            logger.warning(f"Emergency purge: hull integrity now {hull:g}")
            self._emit()
            return True

    def adjust_hull_integrity(self, delta: float) -> float:
        """
        Apply an external change to hull integrity (clamped to 0-100)

        A hull driven to zero is picked up by the next tick's loss check.

        Returns:
            float: Hull integrity after the change
        """
        with self._lock:
            if not self.state.is_active:
                return self.state.hull_integrity
            self.state.hull_integrity = self.state.hull_integrity + delta
            self._emit()
            return self.state.hull_integrity

    def trigger_hazard(self, kind, slider: Optional[int] = None) -> bool:
        """Start a hazard now instead of waiting for the timeline."""
        with self._lock:
            resolved = _coerce_enum(HazardKind, kind)
            if resolved is None:
                logger.warning(f"Ignoring unknown hazard {kind!r}")
                return False
            if slider is not None and slider not in range(SLIDER_COUNT):
                logger.warning(f"Ignoring hazard on unknown slider {slider!r}")
                return False
            return self.hazards.trigger(resolved, slider)

    # ----- Event log -----
    def log(self, message: str) -> bool:
        """
        Append a message to the shift log

        Returns:
            bool: True if the message passed the allow-list
        """
        with self._lock:
            entry = self._log(message)
            if entry is not None:
                self._emit()
            return entry is not None

    def _log(self, message: str) -> Optional[LogEntry]:
        return self.event_log.append(message)

    def get_recent_logs(self):
        with self._lock:
            return self.event_log.entries()

    # ----- Queries -----
    def get_state(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot.capture(
                self.state,
                self.drift.multipliers,
                self.drift.alignment,
                self.critical.timers,
                self.hazards.hazards,
                self.critical.should_show_purge(),
                self.event_log.entries(),
            )

    def should_show_purge(self) -> bool:
        with self._lock:
            return self.critical.should_show_purge()

    def compute_reward(self) -> RewardBreakdown:
        return compute_reward(self.get_state())

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    # ----- Observer -----
    def _emit(self, snapshot: Optional[SessionSnapshot] = None):
        observer = self._observer
        if observer is None:
            return
        try:
            observer.on_tick(snapshot or self.get_state())
        except Exception as e:
            logger.error(f"Error in update callback: {e}")
