"""Detect installed tool versions and compare them against configured minimums."""
from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolInfo:
    """Result of probing a single executable."""

    name: str
    version: str = ""
    path: Optional[str] = None
    available: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class VersionCheck:
    """A configured minimum version compared with what is installed."""

    tool: str
    required: str
    current: str = ""
    available: bool = False
    satisfied: bool = False
    error: Optional[str] = None


# tool -> ordered (command, args, version regex) candidates; first available wins.
_PROBES: Dict[str, Sequence[Tuple[str, Sequence[str], str]]] = {
    "docker": (("docker", ("--version",), r"Docker version (\d+\.\d+\.\d+)"),),
    "docker-compose": (
        ("docker", ("compose", "version"), r"v?(\d+\.\d+\.\d+)"),
        ("docker-compose", ("--version",), r"docker-compose version (\d+\.\d+\.\d+)"),
    ),
    "go": (("go", ("version",), r"go(\d+\.\d+\.?\d*)"),),
    "node": (("node", ("--version",), r"v?(\d+\.\d+\.\d+)"),),
    "python": (
        ("python3", ("--version",), r"Python (\d+\.\d+\.\d+)"),
        ("python", ("--version",), r"Python (\d+\.\d+\.\d+)"),
    ),
    "npm": (("npm", ("--version",), r"(\d+\.\d+\.\d+)"),),
    "pnpm": (("pnpm", ("--version",), r"(\d+\.\d+\.\d+)"),),
    "yarn": (("yarn", ("--version",), r"(\d+\.\d+\.\d+)"),),
    "make": (("make", ("--version",), r"GNU Make (\d+\.\d+\.?\d*)"),),
}

KNOWN_TOOLS = tuple(_PROBES)

ProbeFn = Callable[[str], ToolInfo]


def probe_tool(name: str) -> ToolInfo:
    """Locate ``name`` on PATH and parse its reported version.

    A tool found on PATH stays available even when its version cannot be read;
    candidates are tried in order until one reports a version.
    """

    candidates = _PROBES.get(name)
    if not candidates:
        return ToolInfo(name=name, error="unknown tool")

    info = ToolInfo(name=name, error="not found in PATH")
    fallback: Optional[ToolInfo] = None
    for command, args, pattern in candidates:
        info = _run_probe(name, command, args, pattern)
        if info.version:
            return info
        if info.available and fallback is None:
            fallback = info
    return fallback or info


def _run_probe(name: str, command: str, args: Sequence[str], pattern: str) -> ToolInfo:
    path = shutil.which(command)
    if path is None:
        return ToolInfo(name=name, error="not found in PATH")

    try:
        completed = subprocess.run(
            [command, *args],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        _LOG.debug("Version probe %s %s failed: %s", command, " ".join(args), exc)
        return ToolInfo(name=name, path=path, available=True, error=f"failed to get version: {exc}")

    output = (completed.stdout or "") + (completed.stderr or "")
    match = re.search(pattern, output)
    if not match:
        return ToolInfo(name=name, path=path, available=True, error="could not parse version")
    return ToolInfo(name=name, version=match.group(1), path=path, available=True)


def detect_tools(probe: ProbeFn = probe_tool) -> Dict[str, ToolInfo]:
    return {name: probe(name) for name in KNOWN_TOOLS}


def parse_version(version: str) -> List[int]:
    """Numeric segments of ``version``; non-numeric segments count as zero."""

    if version.startswith("v"):
        version = version[1:]
    parts: List[int] = []
    for segment in version.split("."):
        digits = re.sub(r"^\D+|\D+$", "", segment)
        parts.append(int(digits) if digits.isdigit() else 0)
    return parts


def compare_versions(current: str, required: str) -> int:
    """Compare the first three segments: -1 if ``current`` is older, 0 if equal, 1 if newer."""

    left = parse_version(current)
    right = parse_version(required)
    for idx in range(3):
        a = left[idx] if idx < len(left) else 0
        b = right[idx] if idx < len(right) else 0
        if a < b:
            return -1
        if a > b:
            return 1
    return 0


def check_versions(requirements: Mapping[str, str], probe: ProbeFn = probe_tool) -> List[VersionCheck]:
    results: List[VersionCheck] = []
    for tool, minimum in requirements.items():
        if not minimum:
            continue
        info = probe(tool)
        if not info.available:
            results.append(
                VersionCheck(tool=tool, required=minimum, error=info.error or "tool not found")
            )
            continue
        results.append(
            VersionCheck(
                tool=tool,
                required=minimum,
                current=info.version,
                available=True,
                satisfied=compare_versions(info.version, minimum) >= 0,
                error=info.error,
            )
        )
    return results


__all__ = [
    "KNOWN_TOOLS",
    "ProbeFn",
    "ToolInfo",
    "VersionCheck",
    "check_versions",
    "compare_versions",
    "detect_tools",
    "parse_version",
    "probe_tool",
]
