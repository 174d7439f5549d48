"""Markdown report and fix-checklist exporters."""
from __future__ import annotations

from typing import Dict, List

from packages.schema.models import Finding, Report, SourceLocation

_SECTIONS = (
    ("blocking", "🔴 Blocking Issues"),
    ("warning", "🟡 Warnings"),
    ("info", "🔵 Info"),
)

_CHECKLIST_SECTIONS = (
    ("blocking", "🚫 Must Fix (Blocking)"),
    ("warning", "⚠️ Should Fix (Warnings)"),
    ("info", "ℹ️ Informational"),
)


def _by_severity(report: Report) -> Dict[str, List[Finding]]:
    grouped: Dict[str, List[Finding]] = {"blocking": [], "warning": [], "info": []}
    for finding in report.findings:
        grouped.setdefault(finding.severity, []).append(finding)
    return grouped


def _format_location(loc: SourceLocation) -> str:
    if loc.line:
        return f"{loc.file}:{loc.line}"
    return loc.file


def to_markdown(report: Report) -> str:
    grouped = _by_severity(report)
    lines: List[str] = [
        "# devcheck Report",
        "",
        f"**Path:** `{report.path}`",
        "",
        "## Summary",
        "",
        "| Severity | Count |",
        "|----------|-------|",
        f"| 🔴 Blocking | {len(grouped['blocking'])} |",
        f"| 🟡 Warning | {len(grouped['warning'])} |",
        f"| 🔵 Info | {len(grouped['info'])} |",
        "",
    ]

    for severity, heading in _SECTIONS:
        if not grouped[severity]:
            continue
        lines.extend([f"## {heading}", ""])
        for finding in grouped[severity]:
            lines.append(f"### `{finding.code}` {finding.title}")
            lines.append("")
            for loc in finding.locations:
                label = "Location" if loc.line else "File"
                lines.append(f"- **{label}:** `{_format_location(loc)}`")
            if finding.details:
                lines.append(f"- **Details:** {finding.details}")
            if finding.suggested_fix:
                lines.append(f"- **Fix:** {finding.suggested_fix}")
            lines.append("")

    lines.extend(["---", ""])
    if grouped["blocking"]:
        lines.append("**❌ Project has blocking issues that must be resolved**")
    elif grouped["warning"]:
        lines.append("**⚠️ Project has warnings to review**")
    else:
        lines.append("**✅ Project looks ready to run**")
    return "\n".join(lines) + "\n"


def to_checklist(report: Report) -> str:
    """Render findings as a markdown checklist of things to fix."""

    grouped = _by_severity(report)
    lines: List[str] = ["# Fix Checklist", "", f"**Project:** {report.path}", ""]

    for severity, heading in _CHECKLIST_SECTIONS:
        if not grouped[severity]:
            continue
        lines.extend([f"## {heading}", ""])
        for finding in grouped[severity]:
            if severity == "info":
                lines.append(f"- [{finding.code}] {finding.title}")
                if finding.details:
                    lines.append(f"  - {finding.details}")
                continue
            lines.append(f"- [ ] **[{finding.code}]** {finding.title}")
            for loc in finding.locations:
                lines.append(f"  - File: `{_format_location(loc)}`")
            if finding.suggested_fix:
                lines.append(f"  - **Fix:** {finding.suggested_fix}")
            lines.append("")
        lines.append("")

    lines.append("---")
    lines.append(
        f"**Total:** {len(grouped['blocking'])} blocking, "
        f"{len(grouped['warning'])} warnings, {len(grouped['info'])} info"
    )
    return "\n".join(lines) + "\n"


__all__ = ["to_checklist", "to_markdown"]
