# deepstoker/reactor/scoring.py
"""End-of-shift credit calculation."""

import math
from dataclasses import asdict, dataclass, replace

from deepstoker.core.constants import BASE_CREDITS, FAILURE_PENALTY_MULTIPLIER, SURVIVAL_BONUS_INTERVAL
from deepstoker.reactor.modifiers import rank_bonus


@dataclass(frozen=True)
class RewardBreakdown:
    base_credits: int
    danger_multiplier: float
    rank_bonus: float
    difficulty_mult: float
    survival_bonus: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


def danger_multiplier(avg_danger: float) -> float:
    """Reward multiplier for the average danger level at shift end."""
    if avg_danger < 50:
        return 2.0
    elif avg_danger < 70:
        return 1.5
    elif avg_danger < 85:
        return 1.0
    return 0.5


def compute_reward(snapshot) -> RewardBreakdown:
    """Credits earned for a shift, before any failure penalty.

    Args:
        snapshot: ``SessionSnapshot`` (or any object with the same metric,
            survival_time, rank and difficulty_mult attributes)

    Returns:
        RewardBreakdown: Every factor plus the floored total
    """
    avg_danger = (snapshot.temperature + snapshot.pressure + snapshot.containment) / 3
    danger = danger_multiplier(avg_danger)
    bonus = rank_bonus(snapshot.rank)
    survival_bonus = math.floor(snapshot.survival_time / SURVIVAL_BONUS_INTERVAL)
    total = math.floor(BASE_CREDITS * danger * bonus * snapshot.difficulty_mult + survival_bonus)

    return RewardBreakdown(
        base_credits=BASE_CREDITS,
        danger_multiplier=danger,
        rank_bonus=bonus,
        difficulty_mult=snapshot.difficulty_mult,
        survival_bonus=survival_bonus,
        total=total,
    )


def apply_failure_penalty(reward: RewardBreakdown, success: bool) -> RewardBreakdown:
    """Halve the total of a failed shift. Successful shifts pass through."""
    if success:
        return reward
    return replace(reward, total=math.floor(reward.total * FAILURE_PENALTY_MULTIPLIER))
