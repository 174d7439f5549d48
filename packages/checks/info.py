"""Informational findings: detected ecosystem and README run hints."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from packages.schema.models import Artifacts, Finding

_LOG = logging.getLogger(__name__)

# Checked in order; only the first match is reported.
RUN_HINTS = (
    "docker compose up",
    "docker-compose up",
    "pnpm install",
    "pnpm dev",
    "npm install",
    "npm run dev",
    "yarn install",
    "yarn dev",
    "go run",
    "make run",
    "make dev",
)


def check_language_info(artifacts: Artifacts) -> List[Finding]:
    if not artifacts.detected_language:
        return []
    title = f"Detected {artifacts.detected_language} project"
    if artifacts.package_manager:
        title += f" with {artifacts.package_manager}"
    return [Finding(code="LANG001", severity="info", title=title)]


def check_readme_hints(base_path: Path, artifacts: Artifacts) -> List[Finding]:
    readme = artifacts.readme
    if readme is None or not readme.found:
        return []

    try:
        text = (base_path / readme.path).read_text(encoding="utf-8", errors="replace").lower()
    except OSError as exc:
        _LOG.debug("Skipping unreadable README %s: %s", readme.path, exc)
        return []

    for hint in RUN_HINTS:
        if hint in text:
            return [
                Finding(
                    code="HINT001",
                    severity="info",
                    title=f"Likely entrypoint: {hint} (from README)",
                ).at(readme.path)
            ]
    return []


__all__ = ["RUN_HINTS", "check_language_info", "check_readme_hints"]
