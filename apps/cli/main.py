
"""Typer CLI entrypoint for devcheck scans."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from packages.checks.engine import scan_project
from packages.config.loader import (
    EXAMPLE_CONFIG,
    ConfigError,
    DevcheckConfig,
    load_config,
    load_config_file,
)
from packages.detector.detect import detect
from packages.exporters.json_report import to_json
from packages.exporters.markdown import to_checklist, to_markdown
from packages.exporters.sarif import to_sarif
from packages.exporters.text import render_text
from packages.profiles.registry import (
    BUILTIN_PROFILES,
    Profile,
    UnknownProfileError,
    get_profile,
    list_profiles,
)
from packages.schema.models import Report
from packages.tools.versions import detect_tools, probe_tool

__version__ = "1.0.0"

app = typer.Typer(
    add_completion=False,
    help="Local project readiness inspector. Read-only analysis; no commands are executed.",
)
err_console = Console(stderr=True)

_LOG = logging.getLogger(__name__)

_VALID_FORMATS = {"text", "json", "markdown", "checklist", "sarif"}
_CONFIG_TEMPLATE_NAME = ".devcheck.yaml"


class DebugLogger:
    """JSONL debug trace writer used during CLI runs."""

    def __init__(self, path: Optional[Path]):
        self._handle = None
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = path.open("w", encoding="utf-8")

    @property
    def enabled(self) -> bool:
        return self._handle is not None

    def log(self, event: str, payload: Optional[dict] = None, **extra: object) -> None:
        if not self._handle:
            return
        entry: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event,
        }
        if payload:
            entry.update(payload)
        if extra:
            entry.update(extra)
        self._handle.write(json.dumps(entry, ensure_ascii=False) + "\n")
        self._handle.flush()

    def close(self) -> None:
        if self._handle:
            self._handle.close()
            self._handle = None


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_profile(name: str) -> Profile:
    try:
        return get_profile(name)
    except UnknownProfileError as exc:
        err_console.print(f"[red]{exc.args[0]}[/]")
        raise typer.Exit(code=2) from exc


def _resolve_config(scan_root: Path, config_path: Optional[Path]) -> DevcheckConfig:
    if config_path is not None:
        try:
            return load_config_file(config_path)
        except ConfigError as exc:
            err_console.print(f"[red]Error loading config: {exc}[/]")
            raise typer.Exit(code=2) from exc

    try:
        return load_config(scan_root)
    except ConfigError as exc:
        err_console.print(f"[yellow]Warning: could not load config: {exc}[/]")
        return DevcheckConfig()


def _render(report: Report, fmt: str, no_color: bool) -> None:
    if fmt == "json":
        typer.echo(to_json(report))
    elif fmt == "markdown":
        typer.echo(to_markdown(report), nl=False)
    elif fmt == "checklist":
        typer.echo(to_checklist(report), nl=False)
    elif fmt == "sarif":
        typer.echo(json.dumps(to_sarif(report, tool_version=__version__), indent=2))
    else:
        console = Console(no_color=no_color, highlight=False, soft_wrap=True)
        render_text(report, console)


@app.command()
def scan(
    path: Path = typer.Option(Path("."), "--path", help="Project directory to scan"),
    profile_name: str = typer.Option(
        "default", "--profile", "-p", help=f"Check profile ({', '.join(list_profiles())})"
    ),
    format: str = typer.Option(
        "text", "--format", "-f", help="Output format: text, json, markdown, checklist, sarif"
    ),
    compose: Optional[str] = typer.Option(None, "--compose", help="Compose file to validate"),
    env: Optional[List[str]] = typer.Option(
        None, "--env", help="Repeatable option: env file(s) to use instead of auto-detection"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Explicit config file path"),
    check_tools: bool = typer.Option(
        False, "--check-tools", help="Check installed tool versions against tool_versions"
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if blocking findings exist"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output"),
    fix_list: Optional[Path] = typer.Option(
        None, "--fix-list", help="Also write a markdown fix checklist to this path"
    ),
    debug_log: Optional[Path] = typer.Option(
        None,
        "--debug-log",
        help="Write debug trace JSONL to this path",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log check internals to stderr"),
) -> None:
    """Scan a project directory for local development readiness issues."""

    _configure_logging(verbose)
    debug = DebugLogger(debug_log)

    try:
        fmt = format.lower()
        if fmt not in _VALID_FORMATS:
            err_console.print(
                f"[red]Unsupported format '{format}'. Choose from {sorted(_VALID_FORMATS)}[/]"
            )
            debug.log("error", {"stage": "options", "message": f"bad format {format}"})
            raise typer.Exit(code=2)

        profile = _resolve_profile(profile_name)

        scan_root = path.resolve()
        if not scan_root.is_dir():
            err_console.print(f"[red]Path not found: {scan_root}[/]")
            debug.log("error", {"stage": "path", "message": f"missing {scan_root}"})
            raise typer.Exit(code=2)

        config = _resolve_config(scan_root, config_path)
        _LOG.info(
            "Starting scan: path=%s profile=%s format=%s check_tools=%s",
            scan_root, profile.name, fmt, check_tools,
        )
        debug.log("start", {
            "path": str(scan_root),
            "profile": profile.name,
            "format": fmt,
            "check_tools": check_tools,
        })

        artifacts = detect(scan_root, compose, env)
        debug.log("artifacts", {"artifacts": artifacts.model_dump(mode="json")})

        report = scan_project(
            scan_root,
            artifacts,
            config,
            profile,
            check_tool_versions=check_tools,
            probe=probe_tool,
        )
        debug.log("filtered_findings", {
            "count": len(report.findings),
            "findings": [f.model_dump(mode="json") for f in report.findings],
        })
        debug.log("summary", {"summary": report.summary.model_dump()})

        if fix_list is not None:
            try:
                fix_list.parent.mkdir(parents=True, exist_ok=True)
                fix_list.write_text(to_checklist(report), encoding="utf-8")
            except OSError as exc:
                err_console.print(f"[red]Error writing fix list: {exc}[/]")
                debug.log("error", {"stage": "fix_list", "message": str(exc)})
                raise typer.Exit(code=2) from exc
            err_console.print(f"[green]Fix checklist written to {fix_list}[/]")

        _render(report, fmt, no_color)

        if strict and report.has_blocking():
            debug.log("exit", {"code": 1, "blocking": report.summary.blocking})
            raise typer.Exit(code=1)

        debug.log("exit", {"code": 0, "blocking": report.summary.blocking})

    finally:
        debug.close()


@app.command("init-config")
def init_config(
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to write the config into"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
) -> None:
    """Create a .devcheck.yaml configuration file with example settings."""

    target = directory / _CONFIG_TEMPLATE_NAME
    if target.exists() and not force:
        err_console.print(f"[red]{target} already exists (use --force to overwrite)[/]")
        raise typer.Exit(code=1)

    directory.mkdir(parents=True, exist_ok=True)
    target.write_text(EXAMPLE_CONFIG, encoding="utf-8")
    typer.echo(f"Created {target}")


@app.command("profiles")
def show_profiles() -> None:
    """List the built-in check profiles."""

    table = Table(title="devcheck profiles")
    table.add_column("Profile")
    table.add_column("Min severity")
    table.add_column("Source scan")
    table.add_column("Description")
    for profile in BUILTIN_PROFILES.values():
        table.add_row(
            profile.name,
            profile.min_severity,
            "yes" if profile.enable_source_scanning else "no",
            profile.description,
        )
    Console(highlight=False).print(table)


@app.command("tools")
def show_tools() -> None:
    """List the development tools devcheck can version-check and what is installed."""

    table = Table(title="devcheck tools")
    table.add_column("Tool")
    table.add_column("Version")
    table.add_column("Path")
    table.add_column("Status")
    for name, info in detect_tools(probe_tool).items():
        if info.version:
            status = "[green]ok[/]"
        elif info.available:
            status = f"[yellow]{escape(info.error or 'unknown version')}[/]"
        else:
            status = f"[red]{escape(info.error or 'not found')}[/]"
        table.add_row(name, info.version or "-", escape(info.path or "-"), status)
    Console(highlight=False).print(table)


if __name__ == "__main__":  # pragma: no cover - manual execution
    app()
