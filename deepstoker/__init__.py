# deepstoker/__init__.py
"""
Deep Stoker: real-time reactor management simulation engine.
"""

from deepstoker.config import EngineConfig, ShiftConfig
from deepstoker.reactor import (
    Control,
    HazardKind,
    Metric,
    ReactorEngine,
    ReactorType,
    SessionSnapshot,
    TerminalCause,
    TerminalResult,
)

__version__ = "0.1.0"

__all__ = [
    'Control', 'EngineConfig', 'HazardKind', 'Metric', 'ReactorEngine', 'ReactorType',
    'SessionSnapshot', 'ShiftConfig', 'TerminalCause', 'TerminalResult',
]
