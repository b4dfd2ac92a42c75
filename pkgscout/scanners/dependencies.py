"""
PkgScout Dependency Reader

Enumerates the packages installed under a scan target by reading every
``package.json`` below it. Only ``name`` and ``version`` are extracted.

The target itself is always walked, but any ``node_modules`` directory
nested below it is pruned: the discoverer already reports each store as
its own target, so descending again would read the same packages twice.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Optional

from pkgscout.core.finding import PackageRef
from pkgscout.core.scanner import (
    DEPENDENCY_STORE,
    MANIFEST_FILENAME,
    SkipHandler,
    TreeWalker,
)


class DependencyReader(TreeWalker):
    """Reads installed package identities from package.json manifests."""

    def __init__(self, on_skip: Optional[SkipHandler] = None) -> None:
        super().__init__(on_skip)

    def read_dependencies(self, root: str) -> List[PackageRef]:
        root = os.fspath(root)
        if not self._open_root(root):
            if os.path.basename(root) == MANIFEST_FILENAME:
                return self._read_manifests([root])
            return []

        manifests: List[str] = []
        for dirpath, dirnames, filenames in self._walk(root):
            dirnames[:] = [d for d in dirnames if d != DEPENDENCY_STORE]
            if MANIFEST_FILENAME in filenames:
                manifests.append(os.path.join(dirpath, MANIFEST_FILENAME))

        return self._read_manifests(manifests)

    def _read_manifests(self, manifests: List[str]) -> List[PackageRef]:
        packages: List[PackageRef] = []
        for manifest in manifests:
            try:
                packages.append(parse_manifest(manifest))
            except (OSError, ValueError) as exc:
                self._skipped(manifest, exc)
        return packages


def parse_manifest(path: str) -> PackageRef:
    """
    Parse a package.json and return its identity.

    Missing ``name``/``version`` fields become empty strings. Raises
    ValueError if the file is not a JSON object or either field is not a
    string, and OSError if it cannot be read.
    """
    raw = Path(path).read_bytes()
    try:
        data = json.loads(raw)
    except RecursionError as exc:
        raise ValueError(f"{path}: manifest is nested too deeply") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: manifest is not a JSON object")

    fields = {}
    for key in ("name", "version"):
        value = data.get(key)
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValueError(f"{path}: {key!r} is not a string")
        fields[key] = value

    return PackageRef(
        name=fields["name"],
        version=fields["version"],
        path=os.path.dirname(path),
    )
