"""TOOL001/TOOL002: required tools missing or older than the configured minimum."""
from __future__ import annotations

from typing import List

from packages.config.loader import ToolVersions
from packages.schema.models import Finding
from packages.tools.versions import ProbeFn, check_versions, probe_tool


def check_tool_versions(tool_versions: ToolVersions, probe: ProbeFn = probe_tool) -> List[Finding]:
    findings: List[Finding] = []
    for check in check_versions(tool_versions.requirements(), probe=probe):
        if not check.available:
            findings.append(
                Finding(
                    code="TOOL001",
                    severity="blocking",
                    title=f"Required tool '{check.tool}' not found",
                    details=f"Tool {check.tool} is required but not installed or not in PATH",
                    suggested_fix=f"Install {check.tool} version {check.required} or higher",
                )
            )
        elif not check.satisfied:
            if check.current:
                details = f"Tool {check.tool} version {check.current} is installed but minimum {check.required} is required"
            else:
                details = f"Tool {check.tool} is installed but its version could not be determined ({check.error or 'no version output'})"
            findings.append(
                Finding(
                    code="TOOL002",
                    severity="warning",
                    title=f"Tool '{check.tool}' version too old: {check.current or 'unknown'} < {check.required}",
                    details=details,
                    suggested_fix=f"Upgrade {check.tool} to version {check.required} or higher",
                )
            )
    return findings


__all__ = ["check_tool_versions"]
