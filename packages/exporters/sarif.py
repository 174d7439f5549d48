
"""SARIF exporter for devcheck reports."""
from __future__ import annotations

from typing import Dict, List

from packages.schema.models import Finding, Report


_LEVEL_MAP = {
    "info": "note",
    "warning": "warning",
    "blocking": "error",
}


def to_sarif(
    report: Report,
    *,
    tool_name: str = "devcheck",
    tool_version: str = "1.0.0",
) -> Dict[str, object]:
    rules = _build_rules(report.findings)
    results = _build_results(report.findings)

    return {
        "version": "2.1.0",
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": tool_name,
                        "version": tool_version,
                        "rules": list(rules.values()),
                    }
                },
                "originalUriBaseIds": {
                    "PROJECTROOT": {"uri": _as_dir_uri(report.path)},
                },
                "results": results,
            }
        ],
    }


def _build_rules(findings: List[Finding]) -> Dict[str, Dict[str, object]]:
    rules: Dict[str, Dict[str, object]] = {}
    for finding in findings:
        if finding.code in rules:
            continue
        rules[finding.code] = {
            "id": finding.code,
            "name": finding.code,
            "shortDescription": {"text": finding.title},
            "properties": {"severity": finding.severity},
        }
    return rules


def _build_results(findings: List[Finding]) -> List[Dict[str, object]]:
    results: List[Dict[str, object]] = []
    for finding in findings:
        message = finding.title
        if finding.details:
            message = f"{message}: {finding.details}"

        result: Dict[str, object] = {
            "ruleId": finding.code,
            "level": _LEVEL_MAP.get(finding.severity, "warning"),
            "message": {"text": message},
        }
        if finding.suggested_fix:
            result["properties"] = {"suggestedFix": finding.suggested_fix}

        locations = []
        for loc in finding.locations:
            physical: Dict[str, object] = {
                "artifactLocation": {"uri": loc.file, "uriBaseId": "PROJECTROOT"},
            }
            if loc.line:
                region: Dict[str, int] = {"startLine": loc.line}
                if loc.column:
                    region["startColumn"] = loc.column
                physical["region"] = region
            locations.append({"physicalLocation": physical})
        if locations:
            result["locations"] = locations
        results.append(result)
    return results


def _as_dir_uri(path: str) -> str:
    uri = path.replace("\\", "/")
    return uri if uri.endswith("/") else uri + "/"


__all__ = ["to_sarif"]
