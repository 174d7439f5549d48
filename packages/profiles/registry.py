"""Named check profiles: severity floor, code allow/deny lists and optional checks."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

from packages.schema.models import Finding, Severity, severity_level


class UnknownProfileError(KeyError):
    """Raised when a profile name is not in the built-in registry."""


@dataclass(frozen=True)
class Profile:
    name: str
    description: str
    min_severity: Severity = "info"
    enabled_codes: Tuple[str, ...] = ()
    disabled_codes: Tuple[str, ...] = ()
    enable_source_scanning: bool = False
    include_info: bool = True

    def allows(self, finding: Finding) -> bool:
        if severity_level(finding.severity) < severity_level(self.min_severity):
            return False
        if finding.severity == "info" and not self.include_info:
            return False
        if self.enabled_codes and finding.code not in self.enabled_codes:
            return False
        return finding.code not in self.disabled_codes

    def filter_findings(self, findings: Iterable[Finding]) -> List[Finding]:
        """Keep findings this profile reports, preserving their order."""

        return [finding for finding in findings if self.allows(finding)]


BUILTIN_PROFILES: Mapping[str, Profile] = MappingProxyType(
    {
        "default": Profile(
            name="default",
            description="Standard development checks",
        ),
        "strict": Profile(
            name="strict",
            description="Strict mode - all checks enabled, fail on any issue",
            enable_source_scanning=True,
        ),
        "ci": Profile(
            name="ci",
            description="CI mode - blocking and warnings only, no info",
            min_severity="warning",
            include_info=False,
        ),
        "minimal": Profile(
            name="minimal",
            description="Minimal mode - only blocking issues",
            min_severity="blocking",
            include_info=False,
        ),
        "full": Profile(
            name="full",
            description="Full analysis including source code scanning",
            enable_source_scanning=True,
        ),
    }
)


def get_profile(name: str) -> Profile:
    try:
        return BUILTIN_PROFILES[name]
    except KeyError:
        raise UnknownProfileError(
            f"Unknown profile '{name}' (available: {', '.join(list_profiles())})"
        ) from None


def list_profiles() -> List[str]:
    return list(BUILTIN_PROFILES)


__all__ = ["BUILTIN_PROFILES", "Profile", "UnknownProfileError", "get_profile", "list_profiles"]
