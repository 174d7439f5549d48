"""Environment file parsing and the example-vs-primary diff check."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Set

from packages.schema.models import Artifacts, Finding

_LOG = logging.getLogger(__name__)

# Shell/OS provided variables never reported as undefined.
STANDARD_VARS = frozenset(
    {"HOME", "USER", "PATH", "PWD", "SHELL", "TERM", "HOSTNAME", "UID", "GID"}
)

_QUOTES = ("'", '"')


def is_standard_var(name: str) -> bool:
    return name in STANDARD_VARS


def parse_env_lines(lines: Iterable[str]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` lines; the last occurrence of a key wins."""

    values: Dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
            value = value[1:-1]
        values[key] = value
    return values


def parse_env_file(path: Path) -> Dict[str, str]:
    """Read ``path`` as an env file; missing or unreadable files yield ``{}``."""

    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_env_lines(handle)
    except OSError as exc:
        _LOG.debug("Skipping unreadable env file %s: %s", path, exc)
        return {}


def collect_defined_vars(base_path: Path, artifacts: Artifacts) -> Set[str]:
    """Union of variable names defined across every present env file."""

    defined: Set[str] = set()
    for env_file in artifacts.found_env_files():
        defined.update(parse_env_file(base_path / env_file.path))
    return defined


def check_env_example(base_path: Path, artifacts: Artifacts) -> List[Finding]:
    findings: List[Finding] = []
    example = artifacts.first_env_example()
    if example is None:
        return findings

    if not artifacts.has_env():
        findings.append(
            Finding(
                code="ENV003",
                severity="warning",
                title=f"{example.path} exists but .env is missing",
                details=f"{example.path} exists but no .env file found",
                suggested_fix=f"Copy {example.path} to .env and fill in values",
            ).at(example.path)
        )
        return findings

    primary = artifacts.primary_env_file()
    if primary is None:
        return findings

    example_vars = parse_env_file(base_path / example.path)
    primary_vars = parse_env_file(base_path / primary.path)
    for key in example_vars:
        if key in primary_vars:
            continue
        findings.append(
            Finding(
                code="ENV002",
                severity="warning",
                title=f"{example.path} has {key} but {primary.path} does not",
                details=f"Variable {key} is defined in {example.path} but missing from {primary.path}",
                suggested_fix=f"Add {key}=<value> to {primary.path}",
            ).at(example.path)
        )
    return findings


__all__ = [
    "STANDARD_VARS",
    "check_env_example",
    "collect_defined_vars",
    "is_standard_var",
    "parse_env_file",
    "parse_env_lines",
]
