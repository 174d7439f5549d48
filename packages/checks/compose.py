"""Checks over compose manifests: variable references, depends_on and build contexts."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Union

import yaml

from packages.checks.env_files import collect_defined_vars, is_standard_var
from packages.config.loader import load_yaml_text
from packages.schema.models import Artifacts, Finding

_LOG = logging.getLogger(__name__)

# ${VAR} and ${VAR:-default}; only the name is captured.
_VAR_REF = re.compile(r"\$\{([^}:]+)(?::-[^}]*)?\}")

_DEFAULT_DOCKERFILE = "Dockerfile"


@dataclass(frozen=True)
class PathBuild:
    """``build: ./dir`` form."""

    context: str

    @property
    def dockerfile(self) -> str:
        return _DEFAULT_DOCKERFILE


@dataclass(frozen=True)
class ObjectBuild:
    """``build: {context: ..., dockerfile: ...}`` form."""

    context: str
    dockerfile: str = _DEFAULT_DOCKERFILE


BuildSpec = Union[PathBuild, ObjectBuild]


def decode_build(raw: Any) -> Optional[BuildSpec]:
    """Decode a service ``build`` directive; unusable shapes decode to ``None``."""

    if isinstance(raw, str):
        return PathBuild(context=raw) if raw else None
    if isinstance(raw, Mapping):
        context = raw.get("context")
        if not isinstance(context, str) or not context:
            return None
        dockerfile = raw.get("dockerfile")
        if isinstance(dockerfile, str) and dockerfile:
            return ObjectBuild(context=context, dockerfile=dockerfile)
        return ObjectBuild(context=context)
    return None


def extract_depends_on(raw: Any) -> List[str]:
    """Service names from the list or mapping form of ``depends_on``."""

    if isinstance(raw, list):
        return [str(item) for item in raw if isinstance(item, (str, int, float))]
    if isinstance(raw, Mapping):
        return [str(key) for key in raw]
    return []


def load_services(path: Path) -> Optional[Dict[str, Dict[str, Any]]]:
    """Return the manifest's ``services`` mapping, or ``None`` if it cannot be read."""

    try:
        data = load_yaml_text(path.read_text(encoding="utf-8", errors="replace"))
    except (OSError, yaml.YAMLError, ValueError) as exc:
        _LOG.debug("Skipping unparsable manifest %s: %s", path, exc)
        return None
    if not isinstance(data, Mapping):
        return None
    services = data.get("services")
    if not isinstance(services, Mapping):
        return None
    return {
        str(name): (body if isinstance(body, Mapping) else {})
        for name, body in services.items()
    }


def check_compose_env_refs(base_path: Path, artifacts: Artifacts) -> List[Finding]:
    """One ENV001 per undefined ``${VAR}`` occurrence, with its line number."""

    findings: List[Finding] = []
    defined = collect_defined_vars(base_path, artifacts)

    for compose in artifacts.found_compose_files():
        try:
            text = (base_path / compose.path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _LOG.debug("Skipping unreadable manifest %s: %s", compose.path, exc)
            continue

        for line_no, line in enumerate(text.splitlines(), start=1):
            for match in _VAR_REF.finditer(line):
                name = match.group(1)
                if name in defined or is_standard_var(name):
                    continue
                findings.append(
                    Finding(
                        code="ENV001",
                        severity="blocking",
                        title=f"${{{name}}} referenced but not defined",
                        details=f"Variable ${{{name}}} is used in {compose.path} but is not defined in any .env file",
                        suggested_fix=f"Add {name}=<value> to .env file",
                    ).at(compose.path, line_no)
                )
    return findings


def check_depends_on(base_path: Path, artifacts: Artifacts) -> List[Finding]:
    findings: List[Finding] = []

    for compose in artifacts.found_compose_files():
        services = load_services(base_path / compose.path)
        if services is None:
            continue
        declared: Set[str] = set(services)
        for name, body in services.items():
            for dependency in extract_depends_on(body.get("depends_on")):
                if dependency in declared:
                    continue
                findings.append(
                    Finding(
                        code="CMP001",
                        severity="blocking",
                        title=f"Service {name} depends on unknown service {dependency}",
                        details=f"depends_on references {dependency} which is not defined in {compose.path}",
                        suggested_fix=f"Add service {dependency} to {compose.path} or remove from depends_on",
                    ).at(compose.path)
                )
    return findings


def check_build_contexts(
    base_path: Path,
    artifacts: Artifacts,
    fallback_contexts: Optional[Mapping[str, str]] = None,
) -> List[Finding]:
    """BUILD001/BUILD002 for every service whose build context or Dockerfile is missing.

    ``fallback_contexts`` (the config's ``build_contexts``) is only consulted for
    services that declare no ``build`` directive in the manifest.
    """

    findings: List[Finding] = []
    fallback_contexts = fallback_contexts or {}

    for compose in artifacts.found_compose_files():
        services = load_services(base_path / compose.path)
        if services is None:
            continue
        for name, body in services.items():
            if body.get("build") is not None:
                spec = decode_build(body.get("build"))
            else:
                spec = decode_build(fallback_contexts.get(name))
            if spec is None:
                continue
            findings.extend(_validate_build(base_path, compose.path, name, spec))
    return findings


def _validate_build(base_path: Path, manifest: str, service: str, spec: BuildSpec) -> List[Finding]:
    findings: List[Finding] = []
    context_path = base_path / spec.context
    dockerfile_rel = (Path(spec.context) / spec.dockerfile).as_posix()

    if not (context_path / spec.dockerfile).exists():
        findings.append(
            Finding(
                code="BUILD001",
                severity="blocking",
                title=f"Dockerfile not found for service {service}",
                details=f"Service {service} expects {spec.dockerfile} at {dockerfile_rel} but it doesn't exist",
                suggested_fix=f"Create {spec.dockerfile} in {spec.context} or update build.context",
            ).at(manifest)
        )

    if not context_path.exists():
        findings.append(
            Finding(
                code="BUILD002",
                severity="blocking",
                title=f"Build context directory not found for service {service}",
                details=f"Service {service} references build context {spec.context} which doesn't exist",
                suggested_fix=f"Create directory {spec.context} or update build.context",
            ).at(manifest)
        )
    return findings


__all__ = [
    "BuildSpec",
    "ObjectBuild",
    "PathBuild",
    "check_build_contexts",
    "check_compose_env_refs",
    "check_depends_on",
    "decode_build",
    "extract_depends_on",
    "load_services",
]
