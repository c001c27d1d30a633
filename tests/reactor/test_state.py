# tests/reactor/test_state.py

import pytest
from deepstoker.reactor.state import Control, Metric, SimulationState


def test_metrics_and_hull_are_clamped():
    state = SimulationState()
    state.temperature = 140.0
    state.pressure = -12.0
    state.hull_integrity = 250.0

    assert state.temperature == 100.0
    assert state.pressure == 0.0
    assert state.hull_integrity == 100.0


def test_times_are_not_clamped():
    state = SimulationState()
    state.elapsed_time = 400.0
    assert state.elapsed_time == 400.0


def test_control_mapping():
    assert Control.VENT_PRESSURE.metric is Metric.PRESSURE
    assert Control.INJECT_COOLANT.metric is Metric.TEMPERATURE
    assert Control.STABILIZE_MAGNETICS.metric is Metric.CONTAINMENT
    assert Control.for_slider(1) is Control.INJECT_COOLANT
    with pytest.raises(ValueError):
        Control.for_slider(3)
