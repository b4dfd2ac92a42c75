"""
PkgScout Target Discoverer

Walks one or more roots and selects the directories worth scanning:
any ``node_modules`` directory and any directory that directly holds a
``package.json``. Exclusion patterns are regular expressions searched
against the full path of every visited entry; an excluded directory is
pruned together with everything beneath it.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from pkgscout.core.errors import ConfigError
from pkgscout.core.scanner import (
    DEPENDENCY_STORE,
    MANIFEST_FILENAME,
    SkipHandler,
    TreeWalker,
)


@dataclass(frozen=True)
class Target:
    path: str


class Discoverer(TreeWalker):
    """Finds package roots and dependency stores under a set of paths."""

    def __init__(
        self,
        exclude_patterns: Iterable[str] = (),
        on_skip: Optional[SkipHandler] = None,
    ) -> None:
        super().__init__(on_skip)
        compiled = []
        for pattern in exclude_patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                raise ConfigError(f"Invalid exclude pattern {pattern!r}: {exc}") from exc
        self.exclude_patterns: tuple[re.Pattern[str], ...] = tuple(compiled)

    def discover(self, roots: Iterable[str]) -> List[Target]:
        targets: List[Target] = []

        for root in roots:
            root = os.fspath(root)
            if self._is_excluded(root):
                continue
            if not self._open_root(root):
                continue

            for dirpath, dirnames, _ in self._walk(root):
                if self._is_target(dirpath):
                    targets.append(Target(path=dirpath))

                dirnames[:] = [
                    d for d in dirnames
                    if not self._is_excluded(os.path.join(dirpath, d))
                ]

        return targets

    def _is_excluded(self, path: str) -> bool:
        return any(pattern.search(path) for pattern in self.exclude_patterns)

    @staticmethod
    def _is_target(dirpath: str) -> bool:
        if os.path.basename(os.path.normpath(dirpath)) == DEPENDENCY_STORE:
            return True
        return os.path.isfile(os.path.join(dirpath, MANIFEST_FILENAME))
