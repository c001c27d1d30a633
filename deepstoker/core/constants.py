# deepstoker/core/constants.py
"""Tuning constants for the reactor simulation.

Times are seconds, metric and hull values are percentages.
"""

# Metric bounds
METRIC_MIN = 0.0
METRIC_MAX = 100.0
INITIAL_METRIC_LEVEL = 30.0
DEFAULT_HULL_INTEGRITY = 100.0

# Drift (percent per tick at multiplier 1)
BASE_DRIFT_RATES = {
    "temperature": 0.8,
    "pressure": 0.7,
    "containment": 0.6,
}
TIME_ACCELERATION_WINDOW = 300.0   # drift doubles after this many seconds of survival
DRIFT_SPIKE_MULTIPLIER = 1.1
DRIFT_FLOOR = 1.0
DRIFT_DECAY_RATE = 0.05            # multiplier units per second while aligned
UPGRADE_DRIFT_FACTOR = 0.8

# Critical condition / emergency purge
CRITICAL_THRESHOLD = 85.0
PURGE_TRIGGER_SECONDS = 5.0
PURGE_RESET_LEVEL = 20.0
PURGE_HULL_COST = 15.0

# Passive status logging
NOMINAL_BAND = (40.0, 60.0)
NOMINAL_LOG_INTERVAL = 30.0        # seconds of engine clock time

# Ambient hooks
LOW_POWER_HUM_THRESHOLD = 75.0
LOW_POWER_HUM_CHANCE = 0.05
HULL_CRITICAL_THRESHOLD = 25.0
HULL_ALARM_CHANCE = 0.02

# Control input
CONTROL_REDUCTION_RANGE = (5, 15)  # inclusive, whole percent

# Hazard timeline (seconds)
EARLY_PHASE_END = 120.0
HEAVY_CURRENT_EARLY_DELAY = (15.0, 20.0)
TRENCH_LIGHTNING_EARLY_DELAY = (20.0, 25.0)
STEADY_PHASE_DELAY = (40.0, 50.0)
TRENCH_LIGHTNING_DURATION = 2.0
HEAVY_CURRENT_DURATION = (8.0, 12.0)
DEEP_SEA_ENTITY_DURATION = (4.0, 6.0)
SLIDER_JAM_DURATION = 5.0
SLIDER_COUNT = 3

# Clock
DEFAULT_TICK_INTERVAL = 0.5
DEFAULT_HAZARD_POLL_INTERVAL = 0.5

# Event log
MAX_LOG_ENTRIES = 6

# Scoring
BASE_CREDITS = 100
SURVIVAL_BONUS_INTERVAL = 5.0
FAILURE_PENALTY_MULTIPLIER = 0.5
