"""Terminal rendering of a report with rich."""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from packages.schema.models import Report

_STYLES = {
    "blocking": "bold red",
    "warning": "bold yellow",
    "info": "cyan",
}

_HEADINGS = (
    ("blocking", "BLOCKING ISSUES"),
    ("warning", "WARNINGS"),
    ("info", "INFO"),
)


def render_text(report: Report, console: Console) -> None:
    summary = report.summary
    console.print(f"devcheck scan: {escape(report.path)}")
    console.rule()

    counts = []
    if summary.blocking:
        counts.append(f"[{_STYLES['blocking']}]BLOCKING: {summary.blocking}[/]")
    if summary.warning:
        counts.append(f"[{_STYLES['warning']}]WARNINGS: {summary.warning}[/]")
    if summary.info:
        counts.append(f"[{_STYLES['info']}]INFO: {summary.info}[/]")
    if counts:
        console.print("  ".join(counts))
    console.print()

    for severity, heading in _HEADINGS:
        findings = [f for f in report.findings if f.severity == severity]
        if not findings:
            continue
        table = Table(title=heading, title_style=_STYLES[severity], title_justify="left")
        table.add_column("Code", style=_STYLES[severity], no_wrap=True)
        table.add_column("Finding")
        table.add_column("Location")
        table.add_column("Fix")
        for finding in findings:
            location = ", ".join(
                f"{loc.file}:{loc.line}" if loc.line else loc.file for loc in finding.locations
            )
            table.add_row(
                escape(finding.code),
                escape(finding.title),
                escape(location),
                escape(finding.suggested_fix or ""),
            )
        console.print(table)
        console.print()

    if summary.blocking:
        console.print("[bold red]Project has blocking issues that must be resolved[/]")
    elif summary.warning:
        console.print("[bold yellow]Project has warnings to review[/]")
    else:
        console.print("[bold green]Project looks ready to run[/]")


__all__ = ["render_text"]
