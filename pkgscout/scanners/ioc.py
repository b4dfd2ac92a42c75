"""
PkgScout IoC Scanner

Looks for indicators of compromise in the files npm executes or ships:
package.json, index.js, postinstall.js and bundle.js. Every pattern is
tested against the whole file; a pattern that matches yields one finding
with its first matched substring as evidence.

Depth is the number of path separators in the normalized path, not the
distance from the scan root. Scanning a deeply nested root therefore
leaves less depth budget than scanning a shallow one.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pkgscout.core.errors import ConfigError
from pkgscout.core.finding import Finding
from pkgscout.core.scanner import MANIFEST_FILENAME, SkipHandler, TreeWalker
from pkgscout.scanners.patterns import Pattern, compile_patterns

TARGET_FILENAMES = frozenset({
    MANIFEST_FILENAME,
    "index.js",
    "postinstall.js",
    "bundle.js",
})

DEFAULT_MAX_DEPTH = 5

DEFAULT_IOC_PATTERNS = [
    r"eval\(.*\)",                  # eval() usage
    r"child_process",               # child process spawning
    r"fs\.unlinkSync",              # file deletion
    r"process\.env\[.*\]",          # environment variable access
    r"require\(['\"]http['\"]\)",   # http requests
    r"bitcoin|crypto|wallet",       # crypto-related
    r"password|passwd|credential",  # credential harvesting
    r"download|fetch.*\.exe",       # executable downloads
]


def path_depth(path: str) -> int:
    return os.path.normpath(path).count(os.sep)


def is_target_file(name: str) -> bool:
    return name in TARGET_FILENAMES


class IoCScanner(TreeWalker):
    """Matches IoC patterns against recognized package files."""

    def __init__(
        self,
        patterns: Iterable[Union[str, Pattern]] = DEFAULT_IOC_PATTERNS,
        max_depth: int = DEFAULT_MAX_DEPTH,
        on_skip: Optional[SkipHandler] = None,
    ) -> None:
        super().__init__(on_skip)
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigError(f"max_depth must be a non-negative integer, got {max_depth!r}")
        self.patterns: tuple[Pattern, ...] = tuple(compile_patterns(patterns))
        self.max_depth = max_depth

    def scan(self, path: str) -> List[Finding]:
        path = os.fspath(path)
        if not self._open_root(path):
            if is_target_file(os.path.basename(path)):
                return self._scan_file(path)
            return []

        if path_depth(path) > self.max_depth:
            return []

        findings: List[Finding] = []
        for dirpath, dirnames, filenames in self._walk(path):
            dirnames[:] = [
                d for d in dirnames
                if path_depth(os.path.join(dirpath, d)) <= self.max_depth
            ]
            for name in filenames:
                if is_target_file(name):
                    findings.extend(self._scan_file(os.path.join(dirpath, name)))

        return findings

    def _scan_file(self, file_path: str) -> List[Finding]:
        try:
            content = Path(file_path).read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            self._skipped(file_path, exc)
            return []

        findings: List[Finding] = []
        for pattern in self.patterns:
            evidence = pattern.search(content)
            if evidence is not None:
                findings.append(Finding.from_match(file_path, evidence))
        return findings
