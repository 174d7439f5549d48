
import json

import pytest
from pydantic import ValidationError

from packages.schema.models import Artifact, Artifacts, Finding, Report, SourceLocation, severity_level


def sample_finding(**overrides) -> Finding:
    data = {
        "code": "ENV001",
        "severity": "blocking",
        "title": "${DATABASE_URL} referenced but not defined",
        "details": "Variable ${DATABASE_URL} is used in compose.yaml but is not defined in any .env file",
        "locations": [{"file": "compose.yaml", "line": 7}],
        "suggested_fix": "Add DATABASE_URL=<value> to .env file",
    }
    data.update(overrides)
    return Finding(**data)


def test_finding_round_trip() -> None:
    finding = sample_finding()
    payload = json.loads(finding.model_dump_json())
    assert Finding.model_validate(payload) == finding


def test_finding_is_immutable() -> None:
    finding = sample_finding()
    with pytest.raises(ValidationError):
        finding.title = "changed"  # type: ignore[misc]


def test_finding_rejects_unknown_severity_and_extra_fields() -> None:
    with pytest.raises(ValidationError):
        sample_finding(severity="critical")

    payload = sample_finding().model_dump()
    payload["unexpected"] = True
    with pytest.raises(ValidationError):
        Finding.model_validate(payload)


def test_at_returns_new_finding_with_location() -> None:
    base = Finding(code="CMP001", severity="blocking", title="Service web depends on unknown service cache")
    located = base.at("compose.yaml")

    assert base.locations == ()
    assert located.locations == (SourceLocation(file="compose.yaml"),)
    assert located.locations[0].line is None
    assert base.at("compose.yaml", 0).locations[0].line is None


def test_severity_order() -> None:
    assert severity_level("blocking") > severity_level("warning") > severity_level("info")
    assert severity_level("bogus") == 0


def test_report_summary_is_recomputed_explicitly() -> None:
    report = Report(
        path="/project",
        findings=[
            sample_finding(),
            sample_finding(code="ENV002", severity="warning"),
            sample_finding(code="LANG001", severity="info", locations=[]),
        ],
    )
    assert report.summary.total == 0

    summary = report.calculate_summary()
    assert (summary.total, summary.blocking, summary.warning, summary.info) == (3, 1, 1, 1)
    assert report.has_blocking()

    report.findings.pop(0)
    assert report.summary.blocking == 1
    report.calculate_summary()
    assert report.summary.blocking == 0
    assert not report.has_blocking()


def test_artifacts_helpers() -> None:
    artifacts = Artifacts(
        env_files=[
            Artifact(type="env", path=".env", found=False),
            Artifact(type="env", path=".env.local", found=True),
            Artifact(type="env", path=".env.development", found=True),
        ],
        env_examples=[
            Artifact(type="env_example", path=".env.sample", found=True),
            Artifact(type="env_example", path="example.env", found=True),
        ],
    )
    assert artifacts.has_env()
    assert artifacts.has_env_example()
    assert not artifacts.has_compose()
    assert artifacts.primary_env_file().path == ".env.local"
    assert artifacts.first_env_example().path == ".env.sample"


def test_report_json_schema_contains_expected_fields() -> None:
    props = Report.model_json_schema()["properties"]
    assert set(props) >= {"path", "artifacts", "findings", "summary"}
