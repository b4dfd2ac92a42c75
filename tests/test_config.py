"""
Tests for Configuration Management
"""

from pathlib import Path

import pytest
import yaml

from pkgscout.core.config import (
    DEFAULT_EXCLUDE_PATTERNS,
    PkgScoutConfig,
    generate_default_config,
)
from pkgscout.core.errors import ConfigError
from pkgscout.scanners.ioc import DEFAULT_IOC_PATTERNS, DEFAULT_MAX_DEPTH


class TestPkgScoutConfig:
    """Tests for PkgScoutConfig."""

    def test_missing_file_gives_defaults(self, temp_dir: Path):
        config = PkgScoutConfig.load(temp_dir / ".pkgscout.yaml")

        assert config.output.format == "console"
        assert config.ioc.patterns == DEFAULT_IOC_PATTERNS
        assert config.ioc.max_depth == DEFAULT_MAX_DEPTH
        assert config.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS
        assert config.blocklist is None
        assert config.workers == 1

    def test_load_values(self, temp_dir: Path):
        path = temp_dir / ".pkgscout.yaml"
        path.write_text(
            "output:\n"
            "  format: json\n"
            "  file: out.json\n"
            "blocklist: bl.yaml\n"
            "ioc:\n"
            "  max_depth: 12\n"
            "  patterns: ['wallet']\n"
            "exclude_patterns: ['/test/']\n"
            "workers: 4\n"
            "log_level: debug\n"
        )

        config = PkgScoutConfig.load(path)

        assert config.output.format == "json"
        assert config.output.file == "out.json"
        assert config.blocklist == "bl.yaml"
        assert config.ioc.max_depth == 12
        assert config.ioc.patterns == ["wallet"]
        assert config.exclude_patterns == ["/test/"]
        assert config.workers == 4
        assert config.log_level == "DEBUG"

    def test_empty_file_gives_defaults(self, temp_dir: Path):
        path = temp_dir / ".pkgscout.yaml"
        path.write_text("")
        assert PkgScoutConfig.load(path) == PkgScoutConfig()

    @pytest.mark.parametrize("content", [
        "output: [unclosed\n",
        "- just\n- a list\n",
        "output:\n  format: xml\n",
        "workers: 0\n",
        "output: json\n",
        "ioc: wallet\n",
        "ioc:\n  patterns: wallet\n",
        "ioc:\n  patterns: [wallet, 3]\n",
        "exclude_patterns: node\n",
    ])
    def test_invalid_config_raises(self, temp_dir: Path, content: str):
        path = temp_dir / ".pkgscout.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError):
            PkgScoutConfig.load(path)

    def test_null_pattern_lists_use_defaults(self, temp_dir: Path):
        path = temp_dir / ".pkgscout.yaml"
        path.write_text("ioc:\n  patterns:\nexclude_patterns:\n")

        config = PkgScoutConfig.load(path)

        assert config.ioc.patterns == DEFAULT_IOC_PATTERNS
        assert config.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS

    def test_default_template_is_loadable(self, temp_dir: Path):
        path = temp_dir / ".pkgscout.yaml"
        path.write_text(generate_default_config())

        config = PkgScoutConfig.load(path)

        assert yaml.safe_load(generate_default_config())["ioc"]["max_depth"] == DEFAULT_MAX_DEPTH
        assert config.blocklist == ".pkgscout-blocklist.json"
        assert config.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS
