"""Scan source files for environment variable reads that no env file defines."""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterator, List, Pattern, Set, Tuple

from packages.checks.env_files import collect_defined_vars, is_standard_var
from packages.schema.models import Artifacts, Finding

_LOG = logging.getLogger(__name__)

_NAME = r"([A-Za-z_][A-Za-z0-9_]*)"

# One "read an environment variable" idiom per ecosystem.
ENV_READ_PATTERNS: Dict[str, Pattern[str]] = {
    "nodejs": re.compile(r"process\.env\." + _NAME),
    "go": re.compile(r'os\.Getenv\s*\(\s*"' + _NAME + r'"\s*\)'),
    "python-environ": re.compile(r"os\.environ\s*\[\s*['\"]" + _NAME + r"['\"]\s*\]"),
    "python-getenv": re.compile(r"os\.getenv\s*\(\s*['\"]" + _NAME + r"['\"]"),
    "java": re.compile(r'System\.getenv\s*\(\s*"' + _NAME + r'"\s*\)'),
    "csharp": re.compile(r'Environment\.GetEnvironmentVariable\s*\(\s*"' + _NAME + r'"\s*\)'),
    "rust": re.compile(r'env::var\s*\(\s*"' + _NAME + r'"\s*\)'),
}

SOURCE_EXTENSIONS = frozenset(
    {".go", ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".cs", ".rs"}
)

SKIP_DIRS = frozenset(
    {"node_modules", "vendor", ".git", "__pycache__", "target", "bin", "obj", ".venv", "venv"}
)


def iter_source_files(base_path: Path) -> Iterator[Path]:
    """Yield scannable files under ``base_path`` in a stable order."""

    for root, dirs, files in os.walk(base_path, onerror=_log_walk_error):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
        for name in sorted(files):
            path = Path(root) / name
            if path.suffix in SOURCE_EXTENSIONS:
                yield path


def iter_env_reads(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line number, variable name)`` for every recognised env read."""

    for line_no, line in enumerate(text.splitlines(), start=1):
        for pattern in ENV_READ_PATTERNS.values():
            for match in pattern.finditer(line):
                yield line_no, match.group(1)


def check_source_env_refs(base_path: Path, artifacts: Artifacts) -> List[Finding]:
    """One SRC001 per undefined variable name; the first occurrence wins."""

    findings: List[Finding] = []
    defined = collect_defined_vars(base_path, artifacts)
    reported: Set[str] = set()

    for path in iter_source_files(base_path):
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _LOG.debug("Skipping unreadable source file %s: %s", path, exc)
            continue
        rel_path = path.relative_to(base_path).as_posix()
        for line_no, name in iter_env_reads(text):
            if name in defined or name in reported or is_standard_var(name):
                continue
            reported.add(name)
            findings.append(
                Finding(
                    code="SRC001",
                    severity="warning",
                    title=f"Environment variable '{name}' used in source but not defined",
                    details=f"Variable {name} is accessed in source code but not found in any .env file",
                    suggested_fix=f"Add {name}=<value> to .env file",
                ).at(rel_path, line_no)
            )
    return findings


def _log_walk_error(exc: OSError) -> None:
    _LOG.debug("Skipping unreadable directory: %s", exc)


__all__ = [
    "ENV_READ_PATTERNS",
    "SKIP_DIRS",
    "SOURCE_EXTENSIONS",
    "check_source_env_refs",
    "iter_env_reads",
    "iter_source_files",
]
