"""
PkgScout Blocklist

Known-malicious package identities. The source is a list of records:

    [
      {"name": "evil-pkg", "versions": []},
      {"name": "left-pad", "versions": ["1.3.1", "1.3.2"]}
    ]

An empty (or missing) ``versions`` list bans every version of the name.
Names compare case-insensitively; versions compare as exact strings.
JSON files are read with ``json``, YAML files with PyYAML.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, List

import yaml

from pkgscout.core.errors import BlocklistParseError
from pkgscout.core.finding import Finding, PackageRef

YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass(frozen=True)
class BlocklistEntry:
    name: str
    versions: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, pkg: PackageRef) -> bool:
        if self.name.casefold() != pkg.name.casefold():
            return False
        return not self.versions or pkg.version in self.versions


class Blocklist:
    """
    Ordered, read-only set of blocklist entries.

    Entries are neither deduplicated nor indexed; a package matching two
    entries produces two findings.
    """

    def __init__(self, entries: Iterable[BlocklistEntry] = ()) -> None:
        self._entries: tuple[BlocklistEntry, ...] = tuple(entries)

    @property
    def entries(self) -> tuple[BlocklistEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BlocklistEntry]:
        return iter(self._entries)

    @classmethod
    def load(cls, path: Path) -> "Blocklist":
        """
        Load a blocklist from a JSON or YAML file.

        Raises OSError if the file cannot be read and BlocklistParseError
        if its content is not a valid blocklist.
        """
        path = Path(path)
        raw = path.read_bytes()

        try:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(raw)
            else:
                data = json.loads(raw)
        except (ValueError, RecursionError, yaml.YAMLError) as exc:
            raise BlocklistParseError(f"{path}: {exc}") from exc

        return cls.from_records(data)

    @classmethod
    def from_records(cls, data: Any) -> "Blocklist":
        """Build a blocklist from decoded records, validating their shape."""
        if not isinstance(data, list):
            raise BlocklistParseError("blocklist must be a list of entries")

        entries: List[BlocklistEntry] = []
        for idx, record in enumerate(data):
            if not isinstance(record, dict):
                raise BlocklistParseError(f"entry {idx}: expected a mapping")

            name = record.get("name")
            if not isinstance(name, str):
                raise BlocklistParseError(f"entry {idx}: 'name' must be a string")

            versions = record.get("versions")
            if versions is None:
                versions = []
            if not isinstance(versions, list) or not all(
                isinstance(v, str) for v in versions
            ):
                raise BlocklistParseError(
                    f"entry {idx} ({name}): 'versions' must be a list of strings"
                )

            entries.append(BlocklistEntry(name=name, versions=tuple(versions)))

        return cls(entries)

    def match(self, pkg: PackageRef) -> List[Finding]:
        return [Finding.from_package(pkg) for entry in self._entries if entry.matches(pkg)]
