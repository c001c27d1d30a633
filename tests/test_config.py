# tests/test_config.py

import pytest
from deepstoker.config import (
    EngineConfig,
    ShiftConfig,
    load_config,
    load_shift,
    load_yaml,
    resolve_shift,
)
from deepstoker.reactor.state import ReactorType
from deepstoker.utils.errors import ConfigurationError


def test_shift_defaults():
    shift = ShiftConfig()
    assert shift.duration == 300.0
    assert shift.reactor_type is ReactorType.CIRCLE
    assert shift.difficulty_mult == 1.0


def test_shift_from_camel_and_snake_case():
    camel = ShiftConfig.from_dict({"duration": 120, "reactorType": "prism", "difficultyMult": 2})
    snake = ShiftConfig.from_dict({"duration": 120, "reactor_type": "prism", "difficulty_mult": 2})
    assert camel == snake
    assert camel.reactor_type is ReactorType.PRISM


def test_shift_preset_with_override():
    shift = ShiftConfig.from_dict({"shift": "deep", "duration": 400})
    assert shift.duration == 400.0
    assert shift.difficulty_mult == 3.0


def test_resolve_shift():
    assert resolve_shift("extended") == ShiftConfig(300.0, ReactorType.CIRCLE, 1.5)
    with pytest.raises(ConfigurationError):
        resolve_shift("graveyard")


@pytest.mark.parametrize("kwargs", [
    {"duration": True},
    {"duration": float("nan")},
    {"difficulty_mult": 0.9},
    {"reactor_type": "hexagon"},
])
def test_shift_validation(kwargs):
    with pytest.raises(ConfigurationError):
        ShiftConfig(**kwargs)


def test_engine_config_from_env():
    config = EngineConfig.from_env({
        "DEEPSTOKER_TICK_INTERVAL": "0.25",
        "DEEPSTOKER_SEED": "99",
        "DEEPSTOKER_LOG_LEVEL": "debug",
    })
    assert config.tick_interval == 0.25
    assert config.seed == 99
    assert config.log_level == "DEBUG"
    assert config.max_log_entries == 6


def test_engine_config_bad_env():
    with pytest.raises(ConfigurationError):
        EngineConfig.from_env({"DEEPSTOKER_TICK_INTERVAL": "fast"})
    with pytest.raises(ConfigurationError):
        EngineConfig.from_env({"DEEPSTOKER_LOG_LEVEL": "LOUD"})


def test_merged_ignores_unknown_keys():
    config = EngineConfig().merged({"seed": 5, "turbo": True})
    assert config.seed == 5
    assert not hasattr(config, "turbo")


def test_load_config_overlays_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("engine:\n  seed: 7\n  max_log_entries: 10\nshift: deep\n")

    config = load_config(str(path), environ={"DEEPSTOKER_SEED": "1", "DEEPSTOKER_TICK_INTERVAL": "0.2"})
    assert config.seed == 7
    assert config.max_log_entries == 10
    assert config.tick_interval == 0.2

    assert load_shift(str(path)) == resolve_shift("deep")


def test_load_shift_mapping_and_missing(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("shift:\n  duration: 90\n  reactorType: singularity\n")
    shift = load_shift(str(path))
    assert shift.duration == 90.0
    assert shift.reactor_type is ReactorType.SINGULARITY

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_shift(str(empty)) is None


def test_yaml_must_be_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- one\n- two\n")
    with pytest.raises(ConfigurationError):
        load_yaml(str(path))
