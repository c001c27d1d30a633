# deepstoker/reactor/state.py
"""Session data model for the reactor engine.

Everything mutable here is owned by a single ``ReactorEngine``. Callers only
ever see ``SessionSnapshot`` and ``TerminalResult``, which are frozen copies.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from deepstoker.core.constants import (
    DEFAULT_HULL_INTEGRITY,
    DRIFT_SPIKE_MULTIPLIER,
    INITIAL_METRIC_LEVEL,
    METRIC_MAX,
    METRIC_MIN,
)
from deepstoker.core.types import ReactorType


class Metric(Enum):
    """Danger metrics tracked by the reactor."""
    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    CONTAINMENT = "containment"


class Control(Enum):
    """Player controls. Each one bleeds off a single metric."""
    VENT_PRESSURE = "VENT_PRESSURE"
    INJECT_COOLANT = "INJECT_COOLANT"
    STABILIZE_MAGNETICS = "STABILIZE_MAGNETICS"

    @property
    def metric(self) -> Metric:
        return _CONTROL_METRICS[self]

    @property
    def slider_index(self) -> int:
        return _CONTROL_SLIDERS[self]

    @classmethod
    def for_slider(cls, index: int) -> "Control":
        for control, slider in _CONTROL_SLIDERS.items():
            if slider == index:
                return control
        raise ValueError(f"No control on slider {index}")


_CONTROL_METRICS = {
    Control.VENT_PRESSURE: Metric.PRESSURE,
    Control.INJECT_COOLANT: Metric.TEMPERATURE,
    Control.STABILIZE_MAGNETICS: Metric.CONTAINMENT,
}

# Slider order on the control panel
_CONTROL_SLIDERS = {
    Control.VENT_PRESSURE: 0,
    Control.INJECT_COOLANT: 1,
    Control.STABILIZE_MAGNETICS: 2,
}


class TerminalCause(Enum):
    """Why a shift ended."""
    SUCCESS = "SUCCESS"
    MELTDOWN = "MELTDOWN"      # a metric saturated
    IMPLOSION = "IMPLOSION"    # hull integrity depleted


def clamp_percent(value: float) -> float:
    return max(METRIC_MIN, min(METRIC_MAX, float(value)))


@dataclass
class PerMetric:
    """One value per danger metric."""
    temperature: float
    pressure: float
    containment: float

    def get(self, metric: Metric):
        return getattr(self, metric.value)

    def set(self, metric: Metric, value):
        setattr(self, metric.value, value)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class DriftMultipliers(PerMetric):
    temperature: float = DRIFT_SPIKE_MULTIPLIER
    pressure: float = DRIFT_SPIKE_MULTIPLIER
    containment: float = DRIFT_SPIKE_MULTIPLIER


@dataclass
class ControlAlignment(PerMetric):
    temperature: bool = False
    pressure: bool = False
    containment: bool = False


@dataclass
class CriticalTimers(PerMetric):
    temperature: float = 0.0
    pressure: float = 0.0
    containment: float = 0.0

    def reset(self):
        self.temperature = 0.0
        self.pressure = 0.0
        self.containment = 0.0

    def all_clear(self) -> bool:
        return self.temperature == 0 and self.pressure == 0 and self.containment == 0


@dataclass
class HazardState:
    trench_lightning: bool = False
    heavy_current: bool = False
    deep_sea_entity: bool = False
    jammed_slider: Optional[int] = None  # 0, 1, 2 or None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LogEntry:
    id: int
    message: str
    timestamp: str  # HH:MM:SS local time

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SimulationState:
    """Live state of one shift. Metrics and hull are clamped on write."""
    temperature: float = INITIAL_METRIC_LEVEL
    pressure: float = INITIAL_METRIC_LEVEL
    containment: float = INITIAL_METRIC_LEVEL
    hull_integrity: float = DEFAULT_HULL_INTEGRITY
    survival_time: float = 0.0
    elapsed_time: float = 0.0
    shift_duration: float = 300.0
    difficulty_mult: float = 1.0
    reactor_type: ReactorType = ReactorType.CIRCLE
    rank: str = "Novice"
    upgrades: FrozenSet[str] = frozenset()
    is_active: bool = False
    is_paused: bool = False
    is_complete: bool = False
    success: Optional[bool] = None

    def __setattr__(self, name, value):
        if name in _CLAMPED_FIELDS:
            value = clamp_percent(value)
        object.__setattr__(self, name, value)

    def get_metric(self, metric: Metric) -> float:
        return getattr(self, metric.value)

    def set_metric(self, metric: Metric, value: float):
        setattr(self, metric.value, value)

    def metrics(self) -> Dict[Metric, float]:
        return {metric: self.get_metric(metric) for metric in Metric}


_CLAMPED_FIELDS = frozenset(["temperature", "pressure", "containment", "hull_integrity"])


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of everything a caller may render."""
    temperature: float
    pressure: float
    containment: float
    hull_integrity: float
    survival_time: float
    elapsed_time: float
    shift_duration: float
    difficulty_mult: float
    reactor_type: str
    rank: str
    upgrades: Tuple[str, ...]
    is_active: bool
    is_paused: bool
    is_complete: bool
    success: Optional[bool]
    show_purge_button: bool
    drift_multipliers: Dict[str, float] = field(default_factory=dict)
    control_alignment: Dict[str, bool] = field(default_factory=dict)
    critical_timers: Dict[str, float] = field(default_factory=dict)
    hazard_state: Dict[str, object] = field(default_factory=dict)
    recent_logs: Tuple[LogEntry, ...] = ()

    @classmethod
    def capture(cls, state: SimulationState, drift: DriftMultipliers, alignment: ControlAlignment,
                timers: CriticalTimers, hazards: HazardState, show_purge_button: bool,
                recent_logs) -> "SessionSnapshot":
        return cls(
            temperature=state.temperature,
            pressure=state.pressure,
            containment=state.containment,
            hull_integrity=state.hull_integrity,
            survival_time=state.survival_time,
            elapsed_time=state.elapsed_time,
            shift_duration=state.shift_duration,
            difficulty_mult=state.difficulty_mult,
            reactor_type=state.reactor_type.value,
            rank=state.rank,
            upgrades=tuple(sorted(state.upgrades)),
            is_active=state.is_active,
            is_paused=state.is_paused,
            is_complete=state.is_complete,
            success=state.success,
            show_purge_button=show_purge_button,
            drift_multipliers=drift.to_dict(),
            control_alignment=alignment.to_dict(),
            critical_timers=timers.to_dict(),
            hazard_state=hazards.to_dict(),
            recent_logs=tuple(recent_logs),
        )

    def metric(self, metric: Metric) -> float:
        return getattr(self, metric.value)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["upgrades"] = list(self.upgrades)
        data["recent_logs"] = [entry.to_dict() for entry in self.recent_logs]
        return data


@dataclass(frozen=True)
class TerminalResult:
    """Outcome of a finished shift, delivered once to the terminal callback."""
    success: bool
    cause: TerminalCause
    temperature: float
    pressure: float
    containment: float
    hull_integrity: float
    elapsed_time: float
    survival_time: float
    snapshot: SessionSnapshot

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "cause": self.cause.value,
            "temperature": self.temperature,
            "pressure": self.pressure,
            "containment": self.containment,
            "hull_integrity": self.hull_integrity,
            "elapsed_time": self.elapsed_time,
            "survival_time": self.survival_time,
            "snapshot": self.snapshot.to_dict(),
        }
