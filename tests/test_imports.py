# tests/test_imports.py

import os
import subprocess
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.mark.parametrize("module", [
    "deepstoker.config",
    "deepstoker.reactor.engine",
    "deepstoker.reactor.state",
    "deepstoker.api",
    "deepstoker.cli",
])
def test_module_imports_cleanly_in_fresh_interpreter(module):
    env = dict(os.environ, PYTHONPATH=ROOT + os.pathsep + os.environ.get("PYTHONPATH", ""))
    proc = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=ROOT, env=env, capture_output=True, text=True,
    )
    assert proc.returncode == 0, proc.stderr


def test_config_does_not_pull_in_reactor_engine():
    env = dict(os.environ, PYTHONPATH=ROOT + os.pathsep + os.environ.get("PYTHONPATH", ""))
    code = "import deepstoker.config as c; print(c.ShiftConfig().reactor_type.value)"
    proc = subprocess.run([sys.executable, "-c", code], cwd=ROOT, env=env, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "circle"
