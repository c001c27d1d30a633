#!/usr/bin/env python3
# deepstoker/cli.py
"""
Headless shift runner.

Runs one shift to completion with a simple built-in strategy and prints the
outcome. By default simulated time runs as fast as possible on a manual
scheduler; ``--realtime`` ticks on wall-clock timers instead.
"""

import argparse
import logging
import random
import sys
import threading
import time

from deepstoker.config import SHIFT_PRESETS, ShiftConfig, load_config, load_shift, resolve_shift
from deepstoker.core.scheduler import ManualScheduler, ThreadingScheduler
from deepstoker.core.types import ReactorType
from deepstoker.reactor.engine import ReactorEngine
from deepstoker.reactor.modifiers import RANK_ORDER
from deepstoker.reactor.scoring import apply_failure_penalty
from deepstoker.reactor.state import Control
from deepstoker.utils.errors import UserError, format_error, format_success
from deepstoker.utils.logger import setup_logging

logger = logging.getLogger(__name__)

# Autopilot reacts to any metric above this level
AUTOPILOT_THRESHOLD = 60.0

EXIT_SUCCESS = 0
EXIT_FAILED_SHIFT = 1
EXIT_BAD_CONFIG = 2


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Run a Deep Stoker reactor shift")
    parser.add_argument("--shift", choices=sorted(SHIFT_PRESETS), default=None,
                        help="Shift preset (default: standard)")
    parser.add_argument("--duration", type=float, default=None,
                        help="Shift duration in seconds, overrides the preset")
    parser.add_argument("--reactor", choices=[t.value for t in ReactorType], default=None,
                        help="Reactor core type")
    parser.add_argument("--rank", default="Novice", help=f"Career rank ({', '.join(RANK_ORDER)})")
    parser.add_argument("--upgrade", action="append", default=[], dest="upgrades",
                        help="Owned upgrade, may be repeated")
    parser.add_argument("--hull", type=float, default=100.0, help="Starting hull integrity")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--strategy", choices=["autopilot", "idle"], default="autopilot",
                        help="How controls are operated during the shift")
    parser.add_argument("--realtime", action="store_true", help="Tick on wall-clock time")
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--log-file", default=None, help="Write logs to this file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_shift(args) -> ShiftConfig:
    """Combine the config file's shift section with command line overrides."""
    shift = load_shift(args.config) if args.config else None
    if args.shift:
        shift = resolve_shift(args.shift)
    if shift is None:
        shift = resolve_shift("standard")

    data = shift.to_dict()
    if args.duration is not None:
        data["duration"] = args.duration
    if args.reactor is not None:
        data["reactor_type"] = args.reactor
    return ShiftConfig.from_dict(data)


def autopilot(engine: ReactorEngine):
    """Bleed off any metric running hot and purge when offered."""
    snapshot = engine.get_state()
    if not snapshot.is_active:
        return

    if snapshot.show_purge_button:
        engine.trigger_emergency_purge()
        return

    for control in Control:
        if snapshot.metric(control.metric) > AUTOPILOT_THRESHOLD:
            engine.apply_control(control, is_in_optimal_band=True)


def run_accelerated(engine: ReactorEngine, scheduler: ManualScheduler, strategy):
    interval = engine.config.tick_interval
    while engine.result is None:
        scheduler.advance(interval)
        if strategy is not None:
            strategy(engine)
    return engine.result


def run_realtime(engine: ReactorEngine, done: threading.Event, strategy):
    interval = engine.config.tick_interval
    try:
        while not done.wait(interval):
            if strategy is not None:
                strategy(engine)
    except KeyboardInterrupt:
        print("\nShift abandoned")
        engine.stop()
        return None
    return engine.result


def report(engine: ReactorEngine, result):
    reward = engine.compute_reward()
    final = apply_failure_penalty(reward, result.success)

    details = {
        "Cause": result.cause.value,
        "Elapsed": f"{result.elapsed_time:.1f}s",
        "Temperature": f"{result.temperature:.1f}",
        "Pressure": f"{result.pressure:.1f}",
        "Containment": f"{result.containment:.1f}",
        "Hull integrity": f"{result.hull_integrity:.1f}",
        "Credits": final.total,
    }
    if result.success:
        print(format_success("REACTOR STABILIZED", details))
    else:
        print(format_error("SHIFT FAILED", result.cause.value,
                           f"Credits after failure penalty: {final.total} (of {reward.total})"))
        for key, value in details.items():
            print(f"  {key}: {value}")

    print("Shift log:")
    for entry in engine.get_recent_logs():
        print(f"  [{entry.timestamp}] {entry.message}")


def main(argv=None):
    """Main function to run a shift"""
    args = parse_arguments(argv)

    try:
        config = load_config(args.config)
        overrides = {}
        if args.seed is not None:
            overrides["seed"] = args.seed
        if args.log_file:
            overrides["log_file"] = args.log_file
        if args.debug:
            overrides["log_level"] = "DEBUG"
        if overrides:
            config = config.merged(overrides)
        shift = build_shift(args)
    except (UserError, OSError) as e:
        print(format_error("INVALID_CONFIG", str(e)), file=sys.stderr)
        return EXIT_BAD_CONFIG

    setup_logging(config.log_file, level=config.logging_level)

    scheduler = ThreadingScheduler() if args.realtime else ManualScheduler()
    engine = ReactorEngine(scheduler=scheduler, rng=random.Random(config.seed), config=config)
    strategy = autopilot if args.strategy == "autopilot" else None

    try:
        engine.initialize(args.rank, args.upgrades, args.hull, shift)
    except UserError as e:
        print(format_error("INVALID_CONFIG", str(e)), file=sys.stderr)
        return EXIT_BAD_CONFIG

    print(f"Starting {shift.duration:g}s shift on a {shift.reactor_type.value} reactor "
          f"(rank {args.rank}, strategy {args.strategy})")
    started = time.time()

    done = threading.Event()
    engine.start(on_terminal=lambda result: done.set())

    if args.realtime:
        result = run_realtime(engine, done, strategy)
    else:
        result = run_accelerated(engine, scheduler, strategy)

    if result is None:
        return EXIT_FAILED_SHIFT

    logger.info(f"Shift finished in {time.time() - started:.2f}s wall time")
    report(engine, result)
    return EXIT_SUCCESS if result.success else EXIT_FAILED_SHIFT


if __name__ == "__main__":
    sys.exit(main())
