# tests/core/test_event_bus.py

import pytest
from deepstoker.core.event_bus import HAZARD_ALERT, HOOKS, METAL_CREAK, EventBus


def test_event_bus_publish_subscribe():
    eb = EventBus()
    events = []

    def callback(payload):
        events.append(payload)

    eb.subscribe(HAZARD_ALERT, callback)
    handled = eb.publish(HAZARD_ALERT, {"hazard": "HEAVY_CURRENT"}, source="hazards")

    assert handled == 1
    assert events == [{"type": HAZARD_ALERT, "data": {"hazard": "HEAVY_CURRENT"}, "source": "hazards"}]


def test_every_hook_starts_without_handlers():
    eb = EventBus()
    assert len(HOOKS) == 8
    assert all(eb.subscriber_count(hook) == 0 for hook in HOOKS)


def test_buses_are_independent():
    first, second = EventBus(), EventBus()
    events = []
    first.subscribe(METAL_CREAK, events.append)

    assert second.publish(METAL_CREAK) == 0
    assert events == []


def test_unsubscribe():
    eb = EventBus()
    events = []
    eb.subscribe(METAL_CREAK, events.append)

    assert eb.unsubscribe(METAL_CREAK, events.append) is True
    assert eb.unsubscribe(METAL_CREAK, events.append) is False
    eb.publish(METAL_CREAK)
    assert events == []


def test_unknown_hook_is_rejected():
    eb = EventBus()
    with pytest.raises(ValueError):
        eb.subscribe("fog_horn", print)
    with pytest.raises(ValueError):
        eb.publish("fog_horn")


def test_failing_handler_does_not_block_others():
    eb = EventBus()
    events = []

    def broken(_):
        raise RuntimeError("speaker unplugged")

    eb.subscribe(HAZARD_ALERT, broken)
    eb.subscribe(HAZARD_ALERT, events.append)

    assert eb.publish(HAZARD_ALERT, 1) == 1
    assert len(events) == 1
