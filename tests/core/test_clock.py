# tests/core/test_clock.py

import pytest
from deepstoker.core.clock import TickDriver
from deepstoker.core.scheduler import ManualScheduler


def test_driver_ticks_at_interval():
    scheduler = ManualScheduler()
    deltas = []
    driver = TickDriver(scheduler, deltas.append, interval=0.5)

    assert driver.start() is True
    assert driver.start() is False
    scheduler.advance(2.0)

    assert deltas == [0.5, 0.5, 0.5, 0.5]
    assert driver.tick_count == 4


def test_pause_suppresses_ticks():
    scheduler = ManualScheduler()
    deltas = []
    driver = TickDriver(scheduler, deltas.append, interval=0.5)
    driver.start()

    driver.pause()
    scheduler.advance(2.0)
    assert deltas == []

    driver.resume()
    scheduler.advance(1.0)
    assert len(deltas) == 2


def test_stop_cancels_pending_tick():
    scheduler = ManualScheduler()
    deltas = []
    driver = TickDriver(scheduler, deltas.append, interval=0.5)
    driver.start()
    scheduler.advance(0.5)

    assert driver.stop() is True
    assert driver.stop() is False
    scheduler.advance(5.0)
    assert deltas == [0.5]
    assert scheduler.pending_count() == 0


def test_stop_from_inside_callback():
    scheduler = ManualScheduler()
    driver = TickDriver(scheduler, lambda dt: driver.stop(), interval=0.5)
    driver.start()
    scheduler.advance(5.0)
    assert driver.tick_count == 1


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        TickDriver(ManualScheduler(), lambda dt: None, interval=0)
