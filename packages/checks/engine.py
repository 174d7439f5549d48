"""Run every readiness check in a fixed order and assemble the report."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from packages.checks.compose import check_build_contexts, check_compose_env_refs, check_depends_on
from packages.checks.env_files import check_env_example
from packages.checks.info import check_language_info, check_readme_hints
from packages.checks.rules import check_custom_rules, check_required_env_vars
from packages.checks.source_scan import check_source_env_refs
from packages.checks.tooling import check_tool_versions
from packages.config.loader import DevcheckConfig
from packages.profiles.registry import Profile
from packages.schema.models import Artifacts, Finding, Report
from packages.tools.versions import ProbeFn, probe_tool

_LOG = logging.getLogger(__name__)


@dataclass
class CheckOptions:
    enable_source_scanning: bool = False
    config: DevcheckConfig = field(default_factory=DevcheckConfig)
    check_tool_versions: bool = False
    probe: ProbeFn = probe_tool


def run_checks(base_path: Path, artifacts: Artifacts, options: Optional[CheckOptions] = None) -> List[Finding]:
    """Concatenate the findings of every check, then drop ignored codes."""

    options = options or CheckOptions()
    config = options.config
    findings: List[Finding] = []

    findings.extend(check_compose_env_refs(base_path, artifacts))
    findings.extend(check_env_example(base_path, artifacts))
    findings.extend(check_depends_on(base_path, artifacts))
    findings.extend(check_build_contexts(base_path, artifacts, config.build_contexts))
    findings.extend(check_language_info(artifacts))
    findings.extend(check_readme_hints(base_path, artifacts))

    if options.enable_source_scanning:
        findings.extend(check_source_env_refs(base_path, artifacts))

    if options.check_tool_versions and config.tool_versions is not None:
        findings.extend(check_tool_versions(config.tool_versions, probe=options.probe))

    findings.extend(check_custom_rules(base_path, artifacts, config))
    findings.extend(check_required_env_vars(base_path, artifacts, config))

    _LOG.debug("Checks produced %d raw findings", len(findings))
    return filter_ignored(findings, config)


def filter_ignored(findings: Iterable[Finding], config: DevcheckConfig) -> List[Finding]:
    return [finding for finding in findings if not config.should_ignore_code(finding.code)]


def scan_project(
    base_path: Path,
    artifacts: Artifacts,
    config: DevcheckConfig,
    profile: Profile,
    *,
    check_tool_versions: bool = False,
    probe: ProbeFn = probe_tool,
) -> Report:
    """Run the checks, apply ``profile`` and return a report with its summary computed."""

    options = CheckOptions(
        enable_source_scanning=profile.enable_source_scanning,
        config=config,
        check_tool_versions=check_tool_versions,
        probe=probe,
    )
    findings = profile.filter_findings(run_checks(base_path, artifacts, options))
    report = Report(path=str(base_path), artifacts=artifacts, findings=findings)
    report.calculate_summary()
    return report


__all__ = ["CheckOptions", "filter_ignored", "run_checks", "scan_project"]
