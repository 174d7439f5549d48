"""Load ``.devcheck.yaml`` project configuration."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

_LOG = logging.getLogger(__name__)

CONFIG_FILENAMES = (".devcheck.yaml", ".devcheck.yml", "devcheck.yaml", "devcheck.yml")

_TEXT_TAGS = frozenset(
    {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float", "tag:yaml.org,2002:timestamp"}
)


class TextLoader(yaml.SafeLoader):
    """``SafeLoader`` that leaves numbers and dates as the text written (``3.10`` stays ``"3.10"``)."""


TextLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_yaml_text(text: str):
    return yaml.load(text, Loader=TextLoader)


class ConfigError(Exception):
    """Raised when an explicit configuration file cannot be read or parsed."""


class CustomRule(BaseModel):
    """A user-defined requirement over variable names."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    pattern: str
    required: bool = False
    description: str = ""
    severity: str = ""


class ToolVersions(BaseModel):
    """Minimum tool versions; empty strings mean "not required"."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    docker: str = ""
    docker_compose: str = ""
    go: str = ""
    node: str = ""
    python: str = ""

    def requirements(self) -> Dict[str, str]:
        """Map probe tool names to the configured minimum versions."""

        pairs: List[Tuple[str, str]] = [
            ("docker", self.docker),
            ("docker-compose", self.docker_compose),
            ("go", self.go),
            ("node", self.node),
            ("python", self.python),
        ]
        return {tool: str(version) for tool, version in pairs if version}


class DevcheckConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    custom_rules: List[CustomRule] = Field(default_factory=list)
    tool_versions: Optional[ToolVersions] = None
    # Reserved: accepted for forward compatibility, not consulted by any check.
    ignore_patterns: List[str] = Field(default_factory=list)
    ignore_codes: List[str] = Field(default_factory=list)
    required_env_vars: List[str] = Field(default_factory=list)
    build_contexts: Dict[str, str] = Field(default_factory=dict)

    def should_ignore_code(self, code: str) -> bool:
        return code in self.ignore_codes


def _without_nulls(data: Any) -> Any:
    """Drop keys left empty in YAML (``custom_rules:``) so the model defaults apply."""

    if isinstance(data, dict):
        return {key: _without_nulls(value) for key, value in data.items() if value is not None}
    if isinstance(data, list):
        return [_without_nulls(item) for item in data]
    return data


def find_config_file(base_path: Path) -> Optional[Path]:
    for name in CONFIG_FILENAMES:
        candidate = base_path / name
        if candidate.is_file():
            return candidate
    return None


def load_config(base_path: Path) -> DevcheckConfig:
    """Load the first config file found in ``base_path``, or the defaults."""

    path = find_config_file(base_path)
    if path is None:
        _LOG.debug("No config file under %s; using defaults", base_path)
        return DevcheckConfig()
    return load_config_file(path)


def load_config_file(path: Path) -> DevcheckConfig:
    """Load configuration from ``path``, raising ``ConfigError`` on any failure."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = load_yaml_text(text) or {}
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    try:
        config = DevcheckConfig.model_validate(_without_nulls(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    _LOG.debug("Loaded config from %s (%d custom rules)", path, len(config.custom_rules))
    return config


EXAMPLE_CONFIG = """\
# .devcheck.yaml - devcheck configuration file
#
# Define custom rules for environment variable validation
custom_rules:
  - id: "DB_REQUIRED"
    pattern: "^DATABASE_"
    required: true
    description: "Database configuration variables must be defined"
    severity: blocking

# Minimum tool versions (checked with --check-tools)
tool_versions:
  docker: "20.10.0"
  docker_compose: "2.0.0"

# Reserved for future use
ignore_patterns:
  - "*.backup"
  - "deprecated/"

# Finding codes to ignore
ignore_codes:
  - "HINT001"

# Environment variables that must always be defined
required_env_vars:
  - "NODE_ENV"
  - "DATABASE_URL"

# Build contexts for services that declare no build directive
build_contexts:
  api: "./api"
  web: "./frontend"
"""


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "CustomRule",
    "DevcheckConfig",
    "EXAMPLE_CONFIG",
    "ToolVersions",
    "TextLoader",
    "find_config_file",
    "load_config",
    "load_config_file",
    "load_yaml_text",
]
