# deepstoker/core/event_bus.py
"""
Notification hooks for the reactor engine.

Audio and visual effects live outside the engine. The engine publishes
fire-and-forget notifications here and the presentation layer subscribes
to whichever ones it wants to render.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

# Hook names published by the engine
HAZARD_ALERT = "hazard_alert"
METAL_CREAK = "metal_creak"
LOW_POWER_HUM = "low_power_hum"
HULL_CRITICAL_ALARM = "hull_critical_alarm"
IMPLOSION = "implosion"
STATIC_NOISE = "static_noise"
CONTROL_ALIGNED = "control_aligned"
SUCCESS_CHIME = "success_chime"

HOOKS = (
    HAZARD_ALERT,
    METAL_CREAK,
    LOW_POWER_HUM,
    HULL_CRITICAL_ALARM,
    IMPLOSION,
    STATIC_NOISE,
    CONTROL_ALIGNED,
    SUCCESS_CHIME,
)


def _check_hook(hook: str):
    if hook not in HOOKS:
        raise ValueError(f"Unknown hook '{hook}' (expected one of: {', '.join(HOOKS)})")


class EventBus:
    """Per-engine registry of hook handlers."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {hook: [] for hook in HOOKS}

    def subscribe(self, hook: str, callback: Callable) -> Callable:
        """
        Register ``callback`` for ``hook``

        Args:
            hook (str): One of ``HOOKS``
            callback (callable): Receives ``{"type", "data", "source"}``

        Returns:
            callable: The callback, so this can be used as a decorator

        Raises:
            ValueError: If ``hook`` is not a known hook name
        """
        _check_hook(hook)
        self._handlers[hook].append(callback)
        return callback

    def unsubscribe(self, hook: str, callback: Callable) -> bool:
        handlers = self._handlers.get(hook, [])
        if callback in handlers:
            handlers.remove(callback)
            return True
        return False

    def publish(self, hook: str, data=None, source=None) -> int:
        """
        Deliver a notification to every handler of ``hook``

        A failing handler is logged and skipped; the rest still run.

        Returns:
            int: Number of handlers that completed
        """
        _check_hook(hook)
        payload = {"type": hook, "data": data, "source": source}

        delivered = 0
        for callback in list(self._handlers[hook]):
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in {hook} handler: {e}")
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, hook: str) -> int:
        _check_hook(hook)
        return len(self._handlers[hook])
