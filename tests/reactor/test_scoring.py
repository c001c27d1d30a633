# tests/reactor/test_scoring.py

from types import SimpleNamespace

import pytest
from deepstoker.reactor.scoring import apply_failure_penalty, compute_reward, danger_multiplier


def _snapshot(level, survival_time=0.0, rank="Novice", difficulty_mult=1.0):
    return SimpleNamespace(temperature=level, pressure=level, containment=level,
                           survival_time=survival_time, rank=rank, difficulty_mult=difficulty_mult)


@pytest.mark.parametrize("avg, expected", [(0, 2.0), (49.9, 2.0), (50, 1.5), (70, 1.0), (85, 0.5), (100, 0.5)])
def test_danger_multiplier_bands(avg, expected):
    assert danger_multiplier(avg) == expected


def test_calm_novice_shift():
    reward = compute_reward(_snapshot(30.0, survival_time=180.0))
    assert reward.danger_multiplier == 2.0
    assert reward.survival_bonus == 36
    assert reward.total == 236


def test_rank_and_difficulty_scale_reward():
    reward = compute_reward(_snapshot(60.0, survival_time=12.0, rank="Master", difficulty_mult=3.0))
    # floor(100 * 1.5 * 1.3 * 3.0 + 2)
    assert reward.total == 587


def test_failure_penalty_halves_and_floors():
    reward = compute_reward(_snapshot(90.0, survival_time=7.0))
    assert reward.total == 51
    assert apply_failure_penalty(reward, success=False).total == 25
    assert apply_failure_penalty(reward, success=True) is reward
