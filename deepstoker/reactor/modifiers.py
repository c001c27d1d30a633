# deepstoker/reactor/modifiers.py
"""Rank, upgrade, reactor-type and control-band lookups.

Ranks and upgrades belong to the career layer; the engine only reads them to
scale drift and rewards. Unknown names fall back to the lowest tier.
"""

from typing import Iterable

from deepstoker.core.constants import DRIFT_SPIKE_MULTIPLIER, UPGRADE_DRIFT_FACTOR
from deepstoker.core.types import ReactorType
from deepstoker.reactor.state import Control, Metric

# Lowest to highest
RANK_ORDER = ["Novice", "Technician", "Engineer", "Master", "Overseer", "Abyssal Architect"]

RANK_DRIFT_MULTIPLIERS = {
    "Novice": 1.0,
    "Technician": 1.2,
    "Engineer": 1.4,
    "Master": 1.6,
    "Overseer": 1.8,
    "Abyssal Architect": 2.0,
}

RANK_REWARD_BONUSES = {
    "Novice": 1.0,
    "Technician": 1.1,
    "Engineer": 1.2,
    "Master": 1.3,
    "Overseer": 1.4,
    "Abyssal Architect": 1.5,
}

# Upgrade that softens each metric's drift
MITIGATION_UPGRADES = {
    Metric.TEMPERATURE: "Super-Coolant",
    Metric.PRESSURE: "Hardened Seals",
    Metric.CONTAINMENT: "Magnetics Stabilizer",
}

REACTOR_DRIFT_BASELINES = {
    ReactorType.CIRCLE: DRIFT_SPIKE_MULTIPLIER,
    ReactorType.STAR: 1.4,
    ReactorType.PRISM: DRIFT_SPIKE_MULTIPLIER,
    ReactorType.SINGULARITY: DRIFT_SPIKE_MULTIPLIER,
}

# Inclusive slider ranges that count as "aligned"
OPTIMAL_BANDS = {
    Control.VENT_PRESSURE: (30.0, 50.0),
    Control.INJECT_COOLANT: (40.0, 60.0),
    Control.STABILIZE_MAGNETICS: (35.0, 55.0),
}


def rank_multiplier(rank: str) -> float:
    return RANK_DRIFT_MULTIPLIERS.get(rank, 1.0)


def rank_bonus(rank: str) -> float:
    return RANK_REWARD_BONUSES.get(rank, 1.0)


def upgrade_factor(metric: Metric, upgrades: Iterable[str]) -> float:
    """Drift factor for ``metric`` given the owned upgrades (0.8 or 1.0)."""
    return UPGRADE_DRIFT_FACTOR if MITIGATION_UPGRADES[metric] in upgrades else 1.0


def drift_baseline(reactor_type: ReactorType) -> float:
    return REACTOR_DRIFT_BASELINES[reactor_type]


def is_in_optimal_band(control: Control, setting: float) -> bool:
    """Whether a slider setting sits inside the control's optimal band.

    The engine never sees slider positions; callers use this to turn a
    setting into the alignment flag passed to ``apply_control``.
    """
    low, high = OPTIMAL_BANDS[control]
    return low <= setting <= high
