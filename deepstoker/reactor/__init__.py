# deepstoker/reactor/__init__.py
"""Reactor session model, rules and engine."""

from deepstoker.reactor.state import (
    Control,
    LogEntry,
    Metric,
    ReactorType,
    SessionSnapshot,
    SimulationState,
    TerminalCause,
    TerminalResult,
)
from deepstoker.reactor.hazards import HazardKind
from deepstoker.reactor.scoring import RewardBreakdown, apply_failure_penalty, compute_reward
from deepstoker.reactor.engine import CallbackObserver, ReactorEngine, SessionObserver

__all__ = [
    'CallbackObserver', 'Control', 'HazardKind', 'LogEntry', 'Metric', 'ReactorEngine',
    'ReactorType', 'RewardBreakdown', 'SessionObserver', 'SessionSnapshot', 'SimulationState',
    'TerminalCause', 'TerminalResult', 'apply_failure_penalty', 'compute_reward',
]
