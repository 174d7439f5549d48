"""User-configured variable rules: pattern-based custom rules and required names."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Set

from packages.checks.env_files import collect_defined_vars
from packages.config.loader import CustomRule, DevcheckConfig
from packages.schema.models import SEVERITY_RANK, Artifacts, Finding, Severity

_LOG = logging.getLogger(__name__)


def rule_severity(rule: CustomRule) -> Severity:
    """The rule's configured severity, ``warning`` when unset or unrecognised."""

    value = (rule.severity or "").strip().lower()
    if value in SEVERITY_RANK:
        return value  # type: ignore[return-value]
    return "warning"


def evaluate_custom_rules(rules: Iterable[CustomRule], defined: Set[str]) -> List[Finding]:
    findings: List[Finding] = []
    for rule in rules:
        if not rule.required:
            continue
        try:
            pattern = re.compile(rule.pattern)
        except re.error as exc:
            _LOG.debug("Skipping custom rule %s with invalid pattern %r: %s", rule.id, rule.pattern, exc)
            continue
        if any(pattern.search(name) for name in defined):
            continue
        findings.append(
            Finding(
                code=f"CUSTOM-{rule.id}",
                severity=rule_severity(rule),
                title=f"Custom rule '{rule.id}' not satisfied",
                details=rule.description or None,
                suggested_fix=f"Define a variable matching pattern: {rule.pattern}",
            )
        )
    return findings


def check_custom_rules(base_path: Path, artifacts: Artifacts, config: DevcheckConfig) -> List[Finding]:
    if not config.custom_rules:
        return []
    return evaluate_custom_rules(config.custom_rules, collect_defined_vars(base_path, artifacts))


def check_required_env_vars(base_path: Path, artifacts: Artifacts, config: DevcheckConfig) -> List[Finding]:
    if not config.required_env_vars:
        return []

    defined = collect_defined_vars(base_path, artifacts)
    return [
        Finding(
            code="REQ001",
            severity="blocking",
            title=f"Required variable '{name}' not defined",
            details=f"Variable {name} is configured as required in .devcheck.yaml but is not defined",
            suggested_fix=f"Add {name}=<value> to .env file",
        )
        for name in config.required_env_vars
        if name not in defined
    ]


__all__ = [
    "check_custom_rules",
    "check_required_env_vars",
    "evaluate_custom_rules",
    "rule_severity",
]
