# deepstoker/config.py
"""
Configuration for the Deep Stoker reactor engine.

Two layers live here:

* ``ShiftConfig``: per-session settings handed to ``ReactorEngine.initialize``
  (duration, reactor type, reward multiplier). Validated eagerly because a
  session cannot run without a valid target duration.
* ``EngineConfig``: process-wide runtime settings (tick cadence, RNG seed,
  logging), built from defaults, ``DEEPSTOKER_*`` environment variables and
  an optional YAML file.
"""

import logging
import math
import numbers
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import yaml

from deepstoker.core.constants import (
    DEFAULT_HAZARD_POLL_INTERVAL,
    DEFAULT_TICK_INTERVAL,
    MAX_LOG_ENTRIES,
)
from deepstoker.core.types import ReactorType
from deepstoker.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SHIFT_DURATION = 300.0

# Shift types offered by the career screen: (duration seconds, credit multiplier)
SHIFT_PRESETS = {
    "standard": (180.0, 1.0),
    "extended": (300.0, 1.5),
    "deep": (600.0, 3.0),
}

ENV_PREFIX = "DEEPSTOKER_"


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass
class ShiftConfig:
    """Settings for a single shift."""

    duration: float = DEFAULT_SHIFT_DURATION
    reactor_type: ReactorType = ReactorType.CIRCLE
    difficulty_mult: float = 1.0

    def __post_init__(self):
        if not _is_number(self.duration) or not math.isfinite(self.duration) or self.duration <= 0:
            raise ConfigurationError(f"Shift duration must be a positive number of seconds (got {self.duration!r})")
        self.duration = float(self.duration)

        if not _is_number(self.difficulty_mult) or not math.isfinite(self.difficulty_mult) or self.difficulty_mult < 1.0:
            raise ConfigurationError(f"Difficulty multiplier must be at least 1.0 (got {self.difficulty_mult!r})")
        self.difficulty_mult = float(self.difficulty_mult)

        if not isinstance(self.reactor_type, ReactorType):
            try:
                self.reactor_type = ReactorType(self.reactor_type)
            except ValueError:
                choices = ", ".join(t.value for t in ReactorType)
                raise ConfigurationError(
                    f"Unknown reactor type {self.reactor_type!r} (expected one of: {choices})"
                ) from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShiftConfig":
        """Build from a mapping using either camelCase or snake_case keys.

        A ``shift`` key names a preset whose duration and multiplier are used
        unless overridden explicitly.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Shift config must be a mapping (got {type(data).__name__})")

        duration = DEFAULT_SHIFT_DURATION
        difficulty_mult = 1.0
        if data.get("shift") is not None:
            duration, difficulty_mult = _preset(data["shift"])

        return cls(
            duration=data.get("duration", duration),
            reactor_type=data.get("reactorType", data.get("reactor_type", ReactorType.CIRCLE)),
            difficulty_mult=data.get("difficultyMult", data.get("difficulty_mult", difficulty_mult)),
        )

    @classmethod
    def coerce(cls, config) -> "ShiftConfig":
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config
        return cls.from_dict(config)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration": self.duration,
            "reactor_type": self.reactor_type.value,
            "difficulty_mult": self.difficulty_mult,
        }


def _preset(name: str):
    try:
        return SHIFT_PRESETS[name]
    except (KeyError, TypeError):
        choices = ", ".join(SHIFT_PRESETS)
        raise ConfigurationError(f"Unknown shift type {name!r} (expected one of: {choices})") from None


def resolve_shift(name: str, reactor_type=ReactorType.CIRCLE) -> ShiftConfig:
    """Shift config for a named preset."""
    duration, difficulty_mult = _preset(name)
    return ShiftConfig(duration=duration, reactor_type=reactor_type, difficulty_mult=difficulty_mult)


@dataclass
class EngineConfig:
    """
    Runtime settings shared by every session an engine runs.
    """

    # Clock
    tick_interval: float = DEFAULT_TICK_INTERVAL
    hazard_poll_interval: float = DEFAULT_HAZARD_POLL_INTERVAL

    # Reproducible runs when set
    seed: Optional[int] = None

    max_log_entries: int = MAX_LOG_ENTRIES

    # Logging
    log_file: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        for name in ("tick_interval", "hazard_poll_interval"):
            value = getattr(self, name)
            if not _is_number(value) or value <= 0:
                raise ConfigurationError(f"{name} must be positive (got {value!r})")
        if not isinstance(self.max_log_entries, int) or self.max_log_entries < 1:
            raise ConfigurationError(f"max_log_entries must be a positive integer (got {self.max_log_entries!r})")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ConfigurationError(f"seed must be an integer (got {self.seed!r})")
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Create config from environment variables."""
        environ = os.environ if environ is None else environ
        try:
            seed = environ.get(f"{ENV_PREFIX}SEED")
            return cls(
                tick_interval=float(environ.get(f"{ENV_PREFIX}TICK_INTERVAL", DEFAULT_TICK_INTERVAL)),
                hazard_poll_interval=float(environ.get(f"{ENV_PREFIX}POLL_INTERVAL", DEFAULT_HAZARD_POLL_INTERVAL)),
                seed=int(seed) if seed else None,
                max_log_entries=int(environ.get(f"{ENV_PREFIX}MAX_LOGS", MAX_LOG_ENTRIES)),
                log_file=environ.get(f"{ENV_PREFIX}LOG_FILE"),
                log_level=environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* environment value: {e}") from e

    def merged(self, overrides: Mapping[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            logger.warning(f"Ignoring unknown engine settings: {', '.join(sorted(unknown))}")
        values = {name: getattr(self, name) for name in known}
        values.update({k: v for k, v in overrides.items() if k in known})
        return EngineConfig(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_yaml(filepath: str) -> Dict[str, Any]:
    """Read a YAML settings file.

    Returns:
        dict: Parsed document; an empty file yields an empty dict
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"{filepath}: top level must be a mapping")

    logger.info(f"Loaded settings from {filepath}")
    return data


def load_config(filepath: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Engine config from the environment, overlaid with the file's ``engine`` section."""
    config = EngineConfig.from_env(environ)
    if filepath:
        section = load_yaml(filepath).get("engine") or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"{filepath}: 'engine' must be a mapping")
        config = config.merged(section)
    return config


def load_shift(filepath: str) -> Optional[ShiftConfig]:
    """Shift config from the file's ``shift`` section, if it has one."""
    section = load_yaml(filepath).get("shift")
    if section is None:
        return None
    if isinstance(section, str):
        return resolve_shift(section)
    return ShiftConfig.from_dict(section)
