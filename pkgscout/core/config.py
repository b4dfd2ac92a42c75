"""
PkgScout Configuration Management

Loads and manages configuration from .pkgscout.yaml files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from pkgscout.core.errors import ConfigError
from pkgscout.scanners.ioc import DEFAULT_IOC_PATTERNS, DEFAULT_MAX_DEPTH


CONFIG_FILENAME = ".pkgscout.yaml"
BLOCKLIST_FILENAME = ".pkgscout-blocklist.json"

OUTPUT_FORMATS = ("console", "json", "sarif")

DEFAULT_EXCLUDE_PATTERNS = [
    r"/\.git(/|$)",
]


@dataclass
class OutputConfig:
    format: str = "console"
    file: Optional[str] = None


@dataclass
class IoCConfig:
    enabled: bool = True
    patterns: list[str] = field(default_factory=lambda: list(DEFAULT_IOC_PATTERNS))
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class PkgScoutConfig:
    """Root configuration object for PkgScout."""

    output: OutputConfig = field(default_factory=OutputConfig)
    ioc: IoCConfig = field(default_factory=IoCConfig)
    blocklist: Optional[str] = None
    exclude_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS)
    )
    workers: int = 1
    log_level: str = "WARNING"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "PkgScoutConfig":
        """
        Load configuration from a YAML file, falling back to defaults
        when the file does not exist.

        Raises ConfigError if the file exists but cannot be read or parsed.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load {config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path}: top level must be a mapping")

        return cls._from_dict(raw)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "PkgScoutConfig":
        """Build config from a parsed YAML dictionary."""
        output_data = _section(data, "output")
        output = OutputConfig(
            format=output_data.get("format", "console"),
            file=output_data.get("file"),
        )
        if output.format not in OUTPUT_FORMATS:
            raise ConfigError(f"Unsupported output format: {output.format!r}")

        ioc_data = _section(data, "ioc")
        ioc = IoCConfig(
            enabled=ioc_data.get("enabled", True),
            patterns=_pattern_list(ioc_data, "ioc.patterns", DEFAULT_IOC_PATTERNS),
            max_depth=ioc_data.get("max_depth", DEFAULT_MAX_DEPTH),
        )

        workers = data.get("workers", 1)
        if not isinstance(workers, int) or workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {workers!r}")

        return cls(
            output=output,
            ioc=ioc,
            blocklist=data.get("blocklist"),
            exclude_patterns=_pattern_list(
                data, "exclude_patterns", DEFAULT_EXCLUDE_PATTERNS
            ),
            workers=workers,
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {value!r}")
    return value


def _pattern_list(data: dict[str, Any], key: str, default: list[str]) -> list[str]:
    """A list of regex strings; a null value falls back to ``default``."""
    name = key.rsplit(".", 1)[-1]
    value = data.get(name)
    if value is None:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return list(value)


def generate_default_config() -> str:
    """Generate a default .pkgscout.yaml configuration file content."""
    return f"""\
# PkgScout Configuration

# Output settings
output:
  format: console  # console, json, sarif
  # file: pkgscout-report.json

# Known-malicious packages (JSON or YAML list of {{name, versions}})
blocklist: {BLOCKLIST_FILENAME}

# IoC pattern scanning
ioc:
  enabled: true
  # Depth counts path separators in the full path, not levels below the root
  max_depth: {DEFAULT_MAX_DEPTH}
  # patterns:
  #   - 'eval\\(.*\\)'
  #   - 'child_process'

# Regular expressions matched against full paths; matching directories
# are skipped along with everything beneath them
exclude_patterns:
  - '/\\.git(/|$)'

workers: 1
log_level: WARNING
"""


def generate_default_blocklist() -> str:
    """Generate an example blocklist file content."""
    return """\
[
  {"name": "example-malicious-package", "versions": []},
  {"name": "example-compromised-package", "versions": ["1.0.1", "1.0.2"]}
]
"""
