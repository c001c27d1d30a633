# deepstoker/reactor/event_log.py
"""Bounded log of significant shift events."""

import itertools
import logging
from collections import deque
from datetime import datetime
from typing import Callable, Optional, Tuple

from deepstoker.core.constants import MAX_LOG_ENTRIES
from deepstoker.reactor.state import LogEntry

logger = logging.getLogger(__name__)

# Messages are accepted when they start with one of these
ALLOWED_EVENTS = (
    "SHIFT STARTED",
    "STATIONARY STEADY",
    "PRESSURE ANOMALY",
    "HAZARD DETECTED",
    "TRENCH LIGHTNING",
    "HEAVY CURRENT",
    "DEEP-SEA ENTITY",
    "SLIDER JAMMED",
    "SLIDER UNJAMMED",
    "EMERGENCY PURGE ACTIVATED",
    "STATUS: NOMINAL",
    "DRIFT SPIKE",
    "REACTOR STABILIZED",
)

# ...or when they mention one of these anywhere
ALLOWED_KEYWORDS = ("FAILURE", "CRITICAL", "IMPLOSION")


def is_allowed(message: str) -> bool:
    return message.startswith(ALLOWED_EVENTS) or any(word in message for word in ALLOWED_KEYWORDS)


def _wall_clock_stamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


class EventLog:
    """FIFO ring buffer of the most recent allowed events."""

    def __init__(self, max_entries: int = MAX_LOG_ENTRIES, stamp: Callable[[], str] = _wall_clock_stamp):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._entries = deque(maxlen=max_entries)
        self._ids = itertools.count(1)
        self._stamp = stamp

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    def append(self, message: str) -> Optional[LogEntry]:
        """Record ``message`` if it passes the allow-list.

        Returns:
            LogEntry: The new entry, or None if the message was filtered out
        """
        if not is_allowed(message):
            logger.debug(f"Dropped log message outside allow-list: {message}")
            return None

        entry = LogEntry(id=next(self._ids), message=message, timestamp=self._stamp())
        self._entries.append(entry)
        logger.info(f"[shift log] {message}")
        return entry

    def entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)
