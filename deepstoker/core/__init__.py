# deepstoker/core/__init__.py
"""Engine-independent building blocks: scheduling, ticking and hooks."""

from deepstoker.core.event_bus import EventBus
from deepstoker.core.scheduler import ManualScheduler, ScheduledTask, ThreadingScheduler
from deepstoker.core.clock import TickDriver
from deepstoker.core.types import ReactorType

__all__ = ['EventBus', 'ManualScheduler', 'ReactorType', 'ScheduledTask', 'ThreadingScheduler', 'TickDriver']
