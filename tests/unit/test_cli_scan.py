import json
from pathlib import Path
from textwrap import dedent

from typer.testing import CliRunner

from apps.cli.main import app
from packages.config.loader import EXAMPLE_CONFIG
from packages.tools.versions import ToolInfo


runner = CliRunner()


def _make_project(tmp_path: Path) -> Path:
    (tmp_path / "compose.yaml").write_text(dedent("""\
        services:
          api:
            image: app
            environment:
              DATABASE_URL: ${DATABASE_URL}
        """))
    (tmp_path / "requirements.txt").write_text("flask\n")
    return tmp_path


def test_scan_json_output(tmp_path):
    project = _make_project(tmp_path)

    result = runner.invoke(app, ["scan", "--path", str(project), "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [f["code"] for f in payload["findings"]] == ["ENV001", "LANG001"]
    assert payload["summary"]["blocking"] == 1


def test_strict_exits_one_on_blocking(tmp_path):
    project = _make_project(tmp_path)

    result = runner.invoke(app, ["scan", "--path", str(project), "--strict", "--format", "markdown"])

    assert result.exit_code == 1
    assert "# devcheck Report" in result.stdout


def test_strict_exits_zero_when_ready(tmp_path):
    project = _make_project(tmp_path)
    (project / ".env").write_text("DATABASE_URL=postgres://localhost/app\n")

    result = runner.invoke(app, ["scan", "--path", str(project), "--strict", "--no-color"])

    assert result.exit_code == 0, result.output
    assert "Project looks ready to run" in result.stdout


def test_unknown_profile_and_format_exit_two(tmp_path):
    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--profile", "paranoid"])
    assert result.exit_code == 2

    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--format", "xml"])
    assert result.exit_code == 2


def test_missing_path_exits_two(tmp_path):
    result = runner.invoke(app, ["scan", "--path", str(tmp_path / "nope")])
    assert result.exit_code == 2


def test_bad_explicit_config_exits_two(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("custom_rules: [unterminated\n")

    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--config", str(bad)])

    assert result.exit_code == 2


def test_project_config_and_ci_profile(tmp_path):
    project = _make_project(tmp_path)
    (project / ".devcheck.yaml").write_text(dedent("""\
        ignore_codes: [ENV001]
        required_env_vars: [SECRET_KEY]
        """))

    result = runner.invoke(app, ["scan", "--path", str(project), "--profile", "ci", "--format", "json"])

    payload = json.loads(result.stdout)
    assert [f["code"] for f in payload["findings"]] == ["REQ001"]


def test_check_tools_uses_probe(monkeypatch, tmp_path):
    (tmp_path / ".devcheck.yaml").write_text("tool_versions:\n  node: '18.0.0'\n")
    monkeypatch.setattr(
        "apps.cli.main.probe_tool",
        lambda name: ToolInfo(name=name, version="16.0.0", available=True),
    )

    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--check-tools", "--format", "json"])

    payload = json.loads(result.stdout)
    assert [f["code"] for f in payload["findings"]] == ["TOOL002"]


def test_fix_list_and_debug_log(tmp_path):
    project = _make_project(tmp_path)
    fix_list = tmp_path / "out" / "fixes.md"
    debug_path = tmp_path / "out" / "debug.jsonl"

    result = runner.invoke(
        app,
        [
            "scan",
            "--path",
            str(project),
            "--format",
            "sarif",
            "--fix-list",
            str(fix_list),
            "--debug-log",
            str(debug_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "- [ ] **[ENV001]**" in fix_list.read_text()

    entries = [json.loads(line) for line in debug_path.read_text().splitlines()]
    events = [entry["event"] for entry in entries]
    assert events == ["start", "artifacts", "filtered_findings", "summary", "exit"]
    summary = next(entry for entry in entries if entry["event"] == "summary")
    assert summary["summary"]["blocking"] == 1


def test_init_config(tmp_path):
    result = runner.invoke(app, ["init-config", "--dir", str(tmp_path)])
    assert result.exit_code == 0
    assert (tmp_path / ".devcheck.yaml").read_text() == EXAMPLE_CONFIG

    again = runner.invoke(app, ["init-config", "--dir", str(tmp_path)])
    assert again.exit_code == 1

    forced = runner.invoke(app, ["init-config", "--dir", str(tmp_path), "--force"])
    assert forced.exit_code == 0


def test_profiles_command():
    result = runner.invoke(app, ["profiles"])
    assert result.exit_code == 0
    for name in ("default", "strict", "ci", "minimal", "full"):
        assert name in result.stdout


def test_tools_command_lists_probe_results(monkeypatch):
    def fake_probe(name):
        if name == "node":
            return ToolInfo(name=name, version="20.11.1", path="/usr/bin/node", available=True)
        if name == "make":
            return ToolInfo(name=name, path="/usr/bin/make", available=True, error="failed to get version")
        return ToolInfo(name=name, error="not found in PATH")

    monkeypatch.setattr("apps.cli.main.probe_tool", fake_probe)

    result = runner.invoke(app, ["tools"])

    assert result.exit_code == 0
    assert "20.11.1" in result.stdout
    assert "failed to get version" in result.stdout
    assert "not found in PATH" in result.stdout


def test_scan_survives_dates_in_manifest(tmp_path):
    (tmp_path / "compose.yaml").write_text(dedent("""\
        services:
          api:
            image: app
            labels:
              released: 2024-13-45
            depends_on: [db]
        """))

    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--format", "json"])

    assert result.exit_code == 0, result.output
    assert [f["code"] for f in json.loads(result.stdout)["findings"]] == ["CMP001"]


def test_empty_config_keys_keep_other_settings(tmp_path):
    (tmp_path / ".devcheck.yaml").write_text("custom_rules:\nrequired_env_vars:\n  - FOO\n")

    result = runner.invoke(app, ["scan", "--path", str(tmp_path), "--format", "json", "--strict"])

    assert result.exit_code == 1
    assert [f["code"] for f in json.loads(result.stdout)["findings"]] == ["REQ001"]
