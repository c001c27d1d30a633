# tests/test_cli.py

import pytest
from deepstoker import cli


@pytest.fixture
def log_args(tmp_path):
    return ["--log-file", str(tmp_path / "shift.log")]


def test_autopilot_survives_standard_shift(log_args, capsys):
    code = cli.main(["--shift", "standard", "--seed", "11"] + log_args)
    out = capsys.readouterr().out

    assert code == cli.EXIT_SUCCESS
    assert "REACTOR STABILIZED" in out


def test_idle_shift_melts_down(log_args, capsys):
    code = cli.main(["--strategy", "idle", "--seed", "11"] + log_args)
    out = capsys.readouterr().out

    assert code == cli.EXIT_FAILED_SHIFT
    assert "MELTDOWN" in out


def test_bad_duration_is_config_error(log_args, capsys):
    code = cli.main(["--duration", "-5"] + log_args)
    assert code == cli.EXIT_BAD_CONFIG
    assert "INVALID_CONFIG" in capsys.readouterr().err


def test_shift_from_config_file(tmp_path, log_args):
    path = tmp_path / "settings.yaml"
    path.write_text("engine:\n  seed: 4\nshift:\n  duration: 20\n  reactorType: prism\n")

    args = cli.parse_arguments(["--config", str(path), "--reactor", "star"])
    shift = cli.build_shift(args)
    assert shift.duration == 20.0
    assert shift.reactor_type.value == "star"

    assert cli.main(["--config", str(path)] + log_args) == cli.EXIT_SUCCESS
