"""Locate the project artifacts the readiness checks consume."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from packages.schema.models import Artifact, Artifacts

_LOG = logging.getLogger(__name__)

COMPOSE_CANDIDATES = (
    "compose.yaml",
    "compose.yml",
    "docker-compose.yaml",
    "docker-compose.yml",
    "docker-compose.override.yaml",
    "docker-compose.override.yml",
)
ENV_CANDIDATES = (".env", ".env.local", ".env.development", ".env.dev")
ENV_EXAMPLE_CANDIDATES = (".env.example", ".env.sample", ".env.template", "example.env")
README_CANDIDATES = ("README.md", "README.MD", "readme.md", "README.txt", "README")
MAKEFILE_CANDIDATES = ("Makefile", "makefile", "GNUmakefile")

# (file or glob, language, package manager, details)
MANIFESTS: Tuple[Tuple[str, str, str, str], ...] = (
    ("package.json", "nodejs", "", "Node.js project"),
    ("pnpm-lock.yaml", "nodejs", "pnpm", "pnpm lockfile"),
    ("yarn.lock", "nodejs", "yarn", "Yarn lockfile"),
    ("package-lock.json", "nodejs", "npm", "npm lockfile"),
    ("go.mod", "go", "go mod", "Go module"),
    ("pyproject.toml", "python", "", "Python project"),
    ("requirements.txt", "python", "pip", "pip requirements"),
    ("Pipfile", "python", "pipenv", "Pipenv project"),
    ("poetry.lock", "python", "poetry", "Poetry project"),
    ("Cargo.toml", "rust", "cargo", "Rust project"),
    ("pom.xml", "java", "maven", "Maven project"),
    ("build.gradle", "java", "gradle", "Gradle project"),
    ("build.gradle.kts", "java", "gradle", "Gradle Kotlin project"),
    ("*.csproj", "csharp", "dotnet", "C# project"),
    ("*.sln", "csharp", "dotnet", "C# solution"),
)


def detect(
    base_path: Path,
    compose_override: Optional[str] = None,
    env_overrides: Optional[Sequence[str]] = None,
) -> Artifacts:
    """Scan ``base_path`` (non-recursively) for known project files."""

    root = Path(base_path)
    artifacts = Artifacts()
    _detect_compose(root, compose_override, artifacts)
    _detect_env(root, env_overrides or (), artifacts)
    _detect_manifests(root, artifacts)
    artifacts.readme = _first_match(root, README_CANDIDATES, "readme")
    artifacts.makefile = _first_match(root, MAKEFILE_CANDIDATES, "makefile")
    _LOG.debug(
        "Detected %d compose, %d env, %d example, %d manifest files under %s",
        len(artifacts.found_compose_files()),
        len(artifacts.found_env_files()),
        sum(1 for item in artifacts.env_examples if item.found),
        len(artifacts.manifests),
        root,
    )
    return artifacts


def _detect_compose(root: Path, override: Optional[str], artifacts: Artifacts) -> None:
    if override:
        found = _is_file(_resolve(root, override))
        artifacts.compose_files.append(Artifact(type="compose", path=override, found=found))
        if found:
            return

    for name in COMPOSE_CANDIDATES:
        if _is_file(root / name):
            artifacts.compose_files.append(Artifact(type="compose", path=name, found=True))


def _detect_env(root: Path, overrides: Sequence[str], artifacts: Artifacts) -> None:
    if overrides:
        for override in overrides:
            found = _is_file(_resolve(root, override))
            if "example" in override:
                artifacts.env_examples.append(Artifact(type="env_example", path=override, found=found))
            else:
                artifacts.env_files.append(Artifact(type="env", path=override, found=found))
        return

    for name in ENV_CANDIDATES:
        artifacts.env_files.append(Artifact(type="env", path=name, found=_is_file(root / name)))
    for name in ENV_EXAMPLE_CANDIDATES:
        if _is_file(root / name):
            artifacts.env_examples.append(Artifact(type="env_example", path=name, found=True))


def _detect_manifests(root: Path, artifacts: Artifacts) -> None:
    for pattern, language, package_manager, details in MANIFESTS:
        if "*" in pattern:
            matches = sorted(p for p in root.glob(pattern) if p.is_file())
            if not matches:
                continue
            path = matches[0].name
        elif _is_file(root / pattern):
            path = pattern
        else:
            continue

        artifacts.manifests.append(
            Artifact(type="manifest", path=path, language=language, details=details, found=True)
        )
        if artifacts.detected_language is None:
            artifacts.detected_language = language
        if package_manager and artifacts.package_manager is None:
            artifacts.package_manager = package_manager


def _first_match(root: Path, candidates: Sequence[str], kind: str) -> Optional[Artifact]:
    for name in candidates:
        if _is_file(root / name):
            return Artifact(type=kind, path=name, found=True)
    return None


def _resolve(root: Path, value: str) -> Path:
    candidate = Path(value)
    return candidate if candidate.is_absolute() else root / candidate


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


__all__ = [
    "COMPOSE_CANDIDATES",
    "ENV_CANDIDATES",
    "ENV_EXAMPLE_CANDIDATES",
    "MANIFESTS",
    "detect",
]
