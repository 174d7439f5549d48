"""JSON exporter for devcheck reports."""
from __future__ import annotations

import json

from packages.schema.models import Report


def to_json(report: Report, *, indent: int = 2) -> str:
    """Serialise ``report`` with its path, artifacts, findings and summary."""

    payload = report.model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


__all__ = ["to_json"]
