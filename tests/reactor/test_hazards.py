# tests/reactor/test_hazards.py

import random
from unittest.mock import MagicMock

import pytest
from deepstoker.core.event_bus import EventBus, HAZARD_ALERT, METAL_CREAK
from deepstoker.core.scheduler import ManualScheduler
from deepstoker.reactor.hazards import HazardKind, HazardScheduler
from deepstoker.reactor.state import SimulationState

HAZARD_MESSAGES = {kind.value for kind in HazardKind}


@pytest.fixture
def env():
    scheduler = ManualScheduler()
    state = SimulationState(is_active=True)
    logs = []
    events = EventBus()
    on_change = MagicMock()
    hazards = HazardScheduler(scheduler, state, random.Random(7), logs.append, events, on_change)
    return scheduler, state, logs, events, on_change, hazards


def test_early_phase_fires_current_or_lightning(env):
    scheduler, state, logs, events, on_change, hazards = env
    hazards.start()

    scheduler.advance(14.9)
    assert logs == []

    scheduler.advance(11.0)
    assert len(logs) == 1
    assert logs[0] in ("HEAVY CURRENT", "TRENCH LIGHTNING")


def test_steady_phase_draws_any_hazard(env):
    scheduler, state, logs, events, on_change, hazards = env
    state.elapsed_time = 150.0
    hazards.start()

    scheduler.advance(39.9)
    assert logs == []

    scheduler.advance(11.0)
    assert len([m for m in logs if m in HAZARD_MESSAGES]) == 1


def test_no_hazards_while_paused(env):
    scheduler, state, logs, events, on_change, hazards = env
    state.is_paused = True
    hazards.start()

    scheduler.advance(100.0)
    assert logs == []
    assert scheduler.pending_count() == 1


def test_trench_lightning_clears_after_two_seconds(env):
    scheduler, state, logs, events, on_change, hazards = env
    alerts = []
    events.subscribe(HAZARD_ALERT, alerts.append)

    assert hazards.trigger(HazardKind.TRENCH_LIGHTNING) is True
    assert hazards.hazards.trench_lightning is True
    assert alerts[0]["data"]["hazard"] == "TRENCH_LIGHTNING"

    scheduler.advance(2.0)
    assert hazards.hazards.trench_lightning is False
    assert on_change.call_count == 2


def test_retrigger_extends_hazard(env):
    scheduler, state, logs, events, on_change, hazards = env
    hazards.trigger(HazardKind.TRENCH_LIGHTNING)
    scheduler.advance(1.5)
    hazards.trigger(HazardKind.TRENCH_LIGHTNING)

    scheduler.advance(1.0)
    assert hazards.hazards.trench_lightning is True

    scheduler.advance(1.0)
    assert hazards.hazards.trench_lightning is False


def test_slider_jam_lifecycle(env):
    scheduler, state, logs, events, on_change, hazards = env
    creaks = []
    events.subscribe(METAL_CREAK, creaks.append)

    assert hazards.trigger(HazardKind.SLIDER_JAM, slider=1) is True
    assert hazards.is_jammed(1)
    assert len(creaks) == 1

    # Only one slider can be jammed at a time
    assert hazards.trigger(HazardKind.SLIDER_JAM, slider=2) is False

    scheduler.advance(5.0)
    assert hazards.hazards.jammed_slider is None
    assert logs == ["SLIDER JAMMED", "SLIDER UNJAMMED"]


def test_invalid_slider_index(env):
    hazards = env[-1]
    with pytest.raises(ValueError):
        hazards.trigger(HazardKind.SLIDER_JAM, slider=3)


def test_stop_cancels_pending_work(env):
    scheduler, state, logs, events, on_change, hazards = env
    hazards.start()
    hazards.trigger(HazardKind.DEEP_SEA_ENTITY)

    hazards.stop()
    assert scheduler.pending_count() == 0
    assert hazards.trigger(HazardKind.HEAVY_CURRENT) is False
    assert hazards.start() is False


def test_choose_random_kind_uses_equal_weights(env):
    hazards = env[-1]
    hazards.rng = MagicMock()
    for roll, kind in [(0.1, HazardKind.TRENCH_LIGHTNING), (0.3, HazardKind.HEAVY_CURRENT),
                       (0.6, HazardKind.DEEP_SEA_ENTITY), (0.99, HazardKind.SLIDER_JAM)]:
        hazards.rng.random.return_value = roll
        assert hazards.choose_random_kind() is kind


def test_trigger_refused_while_paused(env):
    scheduler, state, logs, events, on_change, hazards = env
    state.is_paused = True

    assert hazards.trigger(HazardKind.HEAVY_CURRENT) is False
    assert hazards.hazards.heavy_current is False
    on_change.assert_not_called()


def test_pause_during_pending_delay_holds_hazard_until_resume(env):
    scheduler, state, logs, events, on_change, hazards = env
    hazards.start()

    scheduler.advance(5.0)
    state.is_paused = True
    # Past the latest possible early-phase due time
    scheduler.advance(60.0)
    assert logs == []

    state.is_paused = False
    scheduler.advance(26.0)
    assert len(logs) == 1
    assert logs[0] in ("HEAVY CURRENT", "TRENCH LIGHTNING")
