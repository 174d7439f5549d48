
"""Core schema models shared across the detector, checks, and exporters."""
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["blocking", "warning", "info"]
ArtifactType = Literal["compose", "env", "env_example", "manifest", "readme", "makefile"]
Language = Literal["nodejs", "go", "python", "rust", "java", "csharp", "unknown"]


SEVERITY_RANK = {
    "blocking": 3,
    "warning": 2,
    "info": 1,
}


PRIMARY_ENV_FILES = (".env", ".env.local")


def severity_level(severity: str) -> int:
    """Numeric rank for ``severity``; unknown values rank below ``info``."""

    return SEVERITY_RANK.get(severity, 0)


class SourceLocation(BaseModel):
    """Position of a finding inside a scanned file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    file: str
    line: Optional[int] = Field(default=None, ge=1)
    column: Optional[int] = Field(default=None, ge=1)


class Finding(BaseModel):
    """A single reported readiness issue."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str
    severity: Severity
    title: str
    details: Optional[str] = None
    locations: Tuple[SourceLocation, ...] = ()
    suggested_fix: Optional[str] = None

    def at(self, file: str, line: Optional[int] = None) -> "Finding":
        """Return a copy of this finding with one more location appended."""

        location = SourceLocation(file=file, line=line or None)
        return self.model_copy(update={"locations": self.locations + (location,)})


class Artifact(BaseModel):
    """A detected project file, or the recorded absence of one."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: ArtifactType
    path: str
    language: Optional[Language] = None
    details: Optional[str] = None
    found: bool = False


class Artifacts(BaseModel):
    """Everything the locator discovered under a project root."""

    model_config = ConfigDict(extra="forbid")

    compose_files: List[Artifact] = Field(default_factory=list)
    env_files: List[Artifact] = Field(default_factory=list)
    env_examples: List[Artifact] = Field(default_factory=list)
    manifests: List[Artifact] = Field(default_factory=list)
    readme: Optional[Artifact] = None
    makefile: Optional[Artifact] = None
    detected_language: Optional[Language] = None
    package_manager: Optional[str] = None

    def has_compose(self) -> bool:
        return any(item.found for item in self.compose_files)

    def has_env(self) -> bool:
        return any(item.found for item in self.env_files)

    def has_env_example(self) -> bool:
        return any(item.found for item in self.env_examples)

    def found_compose_files(self) -> List[Artifact]:
        return [item for item in self.compose_files if item.found]

    def found_env_files(self) -> List[Artifact]:
        return [item for item in self.env_files if item.found]

    def first_env_example(self) -> Optional[Artifact]:
        """The highest-priority example file that exists."""

        return next((item for item in self.env_examples if item.found), None)

    def primary_env_file(self) -> Optional[Artifact]:
        """The first existing ``.env`` or ``.env.local`` file."""

        for item in self.env_files:
            if item.found and item.path in PRIMARY_ENV_FILES:
                return item
        return None


class ReportSummary(BaseModel):
    """Per-severity finding counts."""

    model_config = ConfigDict(extra="forbid")

    total: int = 0
    blocking: int = 0
    warning: int = 0
    info: int = 0


class Report(BaseModel):
    """Scan result: ordered findings plus a summary that callers recompute."""

    model_config = ConfigDict(extra="forbid")

    path: str
    artifacts: Artifacts = Field(default_factory=Artifacts)
    findings: List[Finding] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)

    def calculate_summary(self) -> ReportSummary:
        summary = ReportSummary()
        for finding in self.findings:
            summary.total += 1
            if finding.severity == "blocking":
                summary.blocking += 1
            elif finding.severity == "warning":
                summary.warning += 1
            elif finding.severity == "info":
                summary.info += 1
        self.summary = summary
        return summary

    def has_blocking(self) -> bool:
        return self.summary.blocking > 0


__all__ = [
    "Artifact",
    "ArtifactType",
    "Artifacts",
    "Finding",
    "Language",
    "PRIMARY_ENV_FILES",
    "Report",
    "ReportSummary",
    "SEVERITY_RANK",
    "Severity",
    "SourceLocation",
    "severity_level",
]
