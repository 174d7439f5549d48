#!/usr/bin/env python3

"""Helper entrypoint for composite action to invoke a devcheck scan."""
import os
import shlex
import subprocess
import sys


def _get_env(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise KeyError(f"Missing required environment variable: {name}")
    return value


def build_command() -> list:
    cmd = [
        "devcheck",
        "scan",
        "--path", _get_env("INPUT_PATH"),
        "--profile", os.environ.get("INPUT_PROFILE") or "ci",
        "--format", os.environ.get("INPUT_FORMAT") or "text",
    ]
    config = os.environ.get("INPUT_CONFIG")
    if config:
        cmd.extend(["--config", config])
    for env_file in [f.strip() for f in os.environ.get("INPUT_ENV_FILES", "").split(",") if f.strip()]:
        cmd.extend(["--env", env_file])
    if os.environ.get("INPUT_CHECK_TOOLS", "").lower() in {"1", "true", "yes"}:
        cmd.append("--check-tools")
    if os.environ.get("INPUT_STRICT", "true").lower() in {"1", "true", "yes"}:
        cmd.append("--strict")
    return cmd


def main() -> int:
    cmd = build_command()
    print("Running:", " ".join(shlex.quote(part) for part in cmd))
    result = subprocess.call(cmd)
    return result


if __name__ == "__main__":
    exit_code = main()
    if exit_code not in (0, 1):
        sys.exit(exit_code)
