# deepstoker/reactor/drift.py
"""Drift multipliers and control alignment."""

import logging
from typing import Iterable

from deepstoker.core.constants import (
    BASE_DRIFT_RATES,
    DRIFT_DECAY_RATE,
    DRIFT_FLOOR,
    DRIFT_SPIKE_MULTIPLIER,
    TIME_ACCELERATION_WINDOW,
)
from deepstoker.reactor.modifiers import rank_multiplier, upgrade_factor
from deepstoker.reactor.state import ControlAlignment, DriftMultipliers, Metric

logger = logging.getLogger(__name__)


def base_drift(metric: Metric, survival_time: float, rank: str, upgrades: Iterable[str]) -> float:
    """Per-tick drift of ``metric`` before its multiplier is applied.

    Drift grows linearly with survival time, doubling after 300 seconds,
    and is scaled by rank and any owned mitigation upgrade.
    """
    time_multiplier = 1.0 + survival_time / TIME_ACCELERATION_WINDOW
    return (BASE_DRIFT_RATES[metric.value] * time_multiplier
            * rank_multiplier(rank) * upgrade_factor(metric, upgrades))


class DriftModel:
    """Tracks per-metric drift multipliers and whether each control is aligned.

    A multiplier only decays while its control is held in the optimal band.
    Dropping out of the band snaps it back to 1.1.
    """

    def __init__(self, baseline: float = DRIFT_SPIKE_MULTIPLIER):
        self.multipliers = DriftMultipliers()
        self.alignment = ControlAlignment()
        self.reset(baseline)

    def reset(self, baseline: float = DRIFT_SPIKE_MULTIPLIER):
        self.multipliers = DriftMultipliers(baseline, baseline, baseline)
        self.alignment = ControlAlignment()

    def set_alignment(self, metric: Metric, aligned: bool, paused: bool = False) -> bool:
        """Record the alignment reported for ``metric``.

        Args:
            metric: Metric whose control moved
            aligned: Whether the control is now inside its optimal band
            paused: Spikes are suppressed while the session is paused

        Returns:
            bool: True if the change caused a drift spike
        """
        was_aligned = self.alignment.get(metric)
        self.alignment.set(metric, bool(aligned))

        if was_aligned and not aligned and not paused:
            self.multipliers.set(metric, DRIFT_SPIKE_MULTIPLIER)
            logger.debug(f"Drift spike on {metric.value}")
            return True
        return False

    def decay(self, dt: float):
        for metric in Metric:
            current = self.multipliers.get(metric)
            if self.alignment.get(metric) and current > DRIFT_FLOOR:
                self.multipliers.set(metric, max(DRIFT_FLOOR, current - DRIFT_DECAY_RATE * dt))

    def drift(self, metric: Metric, survival_time: float, rank: str, upgrades: Iterable[str]) -> float:
        """Amount ``metric`` rises this tick."""
        return base_drift(metric, survival_time, rank, upgrades) * self.multipliers.get(metric)
