import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_action_scan.py"


def load_script():
    spec = importlib.util.spec_from_file_location("run_action_scan", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def action_env(monkeypatch):
    for name in ("INPUT_PROFILE", "INPUT_FORMAT", "INPUT_CONFIG", "INPUT_ENV_FILES", "INPUT_CHECK_TOOLS", "INPUT_STRICT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("INPUT_PATH", "svc")
    return monkeypatch


def test_defaults(action_env):
    cmd = load_script().build_command()
    assert cmd == ["devcheck", "scan", "--path", "svc", "--profile", "ci", "--format", "text", "--strict"]


def test_optional_inputs(action_env):
    action_env.setenv("INPUT_PROFILE", "full")
    action_env.setenv("INPUT_FORMAT", "sarif")
    action_env.setenv("INPUT_CONFIG", "ci/devcheck.yaml")
    action_env.setenv("INPUT_ENV_FILES", ".env.ci, .env.shared,")
    action_env.setenv("INPUT_CHECK_TOOLS", "true")
    action_env.setenv("INPUT_STRICT", "false")

    cmd = load_script().build_command()

    assert cmd == [
        "devcheck", "scan",
        "--path", "svc",
        "--profile", "full",
        "--format", "sarif",
        "--config", "ci/devcheck.yaml",
        "--env", ".env.ci",
        "--env", ".env.shared",
        "--check-tools",
    ]


def test_missing_path_raises(action_env):
    action_env.delenv("INPUT_PATH")
    with pytest.raises(KeyError):
        load_script().build_command()


def test_main_returns_exit_code(action_env):
    module = load_script()
    seen = []

    def fake_call(cmd):
        seen.append(cmd)
        return 1

    action_env.setattr(module.subprocess, "call", fake_call)

    assert module.main() == 1
    assert seen[0][:2] == ["devcheck", "scan"]
