"""
Tests for the Blocklist
"""

import json
from pathlib import Path

import pytest

from pkgscout.core.errors import BlocklistParseError
from pkgscout.core.finding import Finding, FindingKind, PackageRef
from pkgscout.scanners.blocklist import Blocklist, BlocklistEntry


@pytest.fixture
def blocklist() -> Blocklist:
    return Blocklist([
        BlocklistEntry("malicious-package"),
        BlocklistEntry("compromised-lib", ("1.0.0", "1.0.1")),
    ])


class TestBlocklistLoad:
    """Tests for Blocklist.load()."""

    def test_load_json(self, temp_dir: Path):
        source = temp_dir / "blocklist.json"
        source.write_text(json.dumps([
            {"name": "evil-pkg", "versions": []},
            {"name": "bad-lib", "versions": ["1.0.0"]},
        ]))

        loaded = Blocklist.load(source)

        assert loaded.entries == (
            BlocklistEntry("evil-pkg", ()),
            BlocklistEntry("bad-lib", ("1.0.0",)),
        )

    def test_load_yaml(self, temp_dir: Path):
        source = temp_dir / "blocklist.yaml"
        source.write_text(
            "- name: evil-pkg\n"
            "  versions: []\n"
            "- name: bad-lib\n"
            "  versions: ['1.0.0', '1.0.1']\n"
        )

        loaded = Blocklist.load(source)

        assert len(loaded) == 2
        assert loaded.entries[1].versions == ("1.0.0", "1.0.1")

    def test_missing_versions_means_any(self, temp_dir: Path):
        source = temp_dir / "blocklist.json"
        source.write_text('[{"name": "evil-pkg"}, {"name": "other", "versions": null}]')

        loaded = Blocklist.load(source)

        assert [e.versions for e in loaded] == [(), ()]

    def test_duplicates_kept(self, temp_dir: Path):
        source = temp_dir / "blocklist.json"
        source.write_text('[{"name": "a", "versions": []}, {"name": "a", "versions": []}]')

        assert len(Blocklist.load(source)) == 2

    def test_missing_file_raises_os_error(self, temp_dir: Path):
        with pytest.raises(OSError):
            Blocklist.load(temp_dir / "missing.json")

    def test_invalid_json_raises_parse_error(self, temp_dir: Path):
        source = temp_dir / "blocklist.json"
        source.write_text("[{invalid json")

        with pytest.raises(BlocklistParseError):
            Blocklist.load(source)

    def test_invalid_yaml_raises_parse_error(self, temp_dir: Path):
        source = temp_dir / "blocklist.yml"
        source.write_text("- name: [unclosed\n")

        with pytest.raises(BlocklistParseError):
            Blocklist.load(source)

    def test_deeply_nested_json_raises_parse_error(self, temp_dir: Path):
        source = temp_dir / "blocklist.json"
        source.write_text("[" * 200000)

        with pytest.raises(BlocklistParseError):
            Blocklist.load(source)

    @pytest.mark.parametrize("data", [
        {"name": "evil-pkg", "versions": []},
        ["evil-pkg"],
        [{"versions": ["1.0.0"]}],
        [{"name": "evil-pkg", "versions": "1.0.0"}],
        [{"name": "evil-pkg", "versions": [1]}],
    [{"name": "evil-pkg", "versions": ""}],
    [{"name": "evil-pkg", "versions": {}}],
    [{"name": "evil-pkg", "versions": 0}],
    [{"name": "evil-pkg", "versions": False}],
    ])
    def test_malformed_structure_raises_parse_error(self, data):
        with pytest.raises(BlocklistParseError):
            Blocklist.from_records(data)


class TestBlocklistMatch:
    """Tests for Blocklist.match()."""

    def test_any_version_entry(self):
        blocklist = Blocklist([BlocklistEntry("evil-pkg")])
        pkg = PackageRef(name="evil-pkg", version="9.9.9", path="/x")

        findings = blocklist.match(pkg)

        assert findings == [
            Finding(
                kind=FindingKind.BLOCKLIST,
                name="evil-pkg",
                version="9.9.9",
                path="/x",
                reason="Matched blocklist",
            )
        ]

    def test_name_is_case_insensitive(self, blocklist: Blocklist):
        pkg = PackageRef("MALICIOUS-PACKAGE", "1.0.0", "/x")

        findings = blocklist.match(pkg)

        assert len(findings) == 1
        assert findings[0].name == "MALICIOUS-PACKAGE"

    def test_listed_version_matches(self, blocklist: Blocklist):
        assert len(blocklist.match(PackageRef("compromised-lib", "1.0.1", "/x"))) == 1

    def test_unlisted_version_does_not_match(self, blocklist: Blocklist):
        assert blocklist.match(PackageRef("compromised-lib", "2.0.0", "/x")) == []

    def test_version_comparison_is_literal(self):
        blocklist = Blocklist([BlocklistEntry("lib", ("1.0.0",))])
        assert blocklist.match(PackageRef("lib", "v1.0.0", "/x")) == []
        assert blocklist.match(PackageRef("lib", "1.0", "/x")) == []

    def test_no_substring_match(self, blocklist: Blocklist):
        assert blocklist.match(PackageRef("malicious-package-extra", "1.0.0", "/x")) == []
        assert blocklist.match(PackageRef("malicious", "1.0.0", "/x")) == []

    def test_every_matching_entry_reported(self):
        blocklist = Blocklist([
            BlocklistEntry("lib"),
            BlocklistEntry("LIB", ("1.0.0",)),
            BlocklistEntry("other"),
        ])

        findings = blocklist.match(PackageRef("lib", "1.0.0", "/x"))

        assert len(findings) == 2

    def test_empty_blocklist(self):
        assert Blocklist().match(PackageRef("anything", "1.0.0", "/x")) == []
